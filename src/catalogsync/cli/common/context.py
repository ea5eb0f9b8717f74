"""Application context management for the CLI."""

from dataclasses import dataclass
from pathlib import Path

from catalogsync.cli.common.exits import die
from catalogsync.core.adapters.catalog import (
    HttpCatalogConnection,
    RecordingCatalogConnection,
)
from catalogsync.core.auth import StsCredentialResolver
from catalogsync.core.config import (
    ProviderConfig,
    SyncSettings,
    load_config_file,
    merge_overrides,
)
from catalogsync.core.errors import ConfigError
from catalogsync.core.sync import CatalogConnection, DynamoDbTableSync


@dataclass
class SyncAppContext:
    """Application context holding the provider config and the sync task."""

    config: ProviderConfig
    task: DynamoDbTableSync


def build_sync_context(
    *,
    config_path: Path | None,
    overrides: dict[str, str | None],
    catalog_url: str | None,
    catalog_token: str | None,
    max_parallel: int,
    timeout: float,
    dry_run: bool,
) -> SyncAppContext:
    """Build the sync context from a config file, CLI overrides and settings.

    Args:
        config_path: Optional YAML file holding the provider block.
        overrides: camelCase config keys taken from CLI options/env vars.
        catalog_url: Catalog ingestion endpoint; required unless dry_run.
        catalog_token: Optional bearer token for the endpoint.
        max_parallel: Cap on concurrent DescribeTable calls.
        timeout: Timeout in seconds for each remote call.
        dry_run: Record the mutation in memory instead of sending it.

    Returns:
        SyncAppContext: Context with a ready-to-run sync task.
    """
    try:
        raw = load_config_file(config_path) if config_path else {}
        config = ProviderConfig.from_mapping(merge_overrides(raw, overrides))
        settings = SyncSettings(max_parallel=max_parallel, timeout=timeout)
    except ConfigError as exc:
        die(str(exc), code=2)

    if dry_run:
        catalog: CatalogConnection = RecordingCatalogConnection()
    elif not catalog_url:
        die("Missing --catalog-url (or CATALOGSYNC_CATALOG_URL).", code=2)
    else:
        catalog = HttpCatalogConnection(
            catalog_url, token=catalog_token, timeout=settings.timeout
        )

    task = DynamoDbTableSync(
        config,
        StsCredentialResolver(timeout=settings.timeout),
        catalog,
        settings=settings,
    )
    return SyncAppContext(config=config, task=task)

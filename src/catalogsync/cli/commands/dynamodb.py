"""Commands for syncing DynamoDB tables into the catalog."""

from __future__ import annotations

import threading
from pathlib import Path

import typer

from catalogsync.cli.common.context import SyncAppContext, build_sync_context
from catalogsync.cli.common.exits import exit_from_exc, ok_exit
from catalogsync.cli.common.logs import setup_logging
from catalogsync.cli.common.options import (
    AccountIdOpt,
    CatalogTokenOpt,
    CatalogUrlOpt,
    ConfigOpt,
    ConfirmOpt,
    DryRunOpt,
    ExternalIdOpt,
    JsonOpt,
    ParallelOpt,
    RegionOpt,
    RoleArnOpt,
    TimeoutOpt,
    VerboseOpt,
)
from catalogsync.cli.common.output import out
from catalogsync.core.errors import SyncCancelledError, SyncError
from catalogsync.core.sync import SyncReport

app = typer.Typer(
    help="Discover DynamoDB tables and publish them as catalog entities.",
    no_args_is_help=True,
)


def _show_report(appctx: SyncAppContext, report: SyncReport) -> None:
    out.header("DynamoDB tables")
    out.kv(
        {
            "Account": appctx.config.account_id,
            "Region": appctx.config.region,
            "Location key": report.location_key,
            "Tables": len(report.identifiers),
            "Entities": len(report.entities),
            "Skipped": len(report.skipped),
            "Failed": len(report.failures),
        }
    )
    if report.entities:
        out.entities_table(report.entities, title="Entities")
    if report.failures:
        out.failures_table(report.failures, title="Describe failures")


@app.command()
def sync(
    config: Path | None = ConfigOpt,
    account_id: str | None = AccountIdOpt,
    role_arn: str | None = RoleArnOpt,
    external_id: str | None = ExternalIdOpt,
    region: str | None = RegionOpt,
    catalog_url: str | None = CatalogUrlOpt,
    catalog_token: str | None = CatalogTokenOpt,
    parallel: int = ParallelOpt,
    timeout: float = TimeoutOpt,
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
    as_json: bool = JsonOpt,
    verbose: bool = VerboseOpt,
):
    """
    Replace the catalog entities of one account with its current DynamoDB tables.
    """
    setup_logging(verbose)
    appctx = build_sync_context(
        config_path=config,
        overrides={
            "accountId": account_id,
            "roleArn": role_arn,
            "externalId": external_id,
            "region": region,
        },
        catalog_url=catalog_url,
        catalog_token=catalog_token,
        max_parallel=parallel,
        timeout=timeout,
        dry_run=dry_run,
    )
    task = appctx.task
    cancel = threading.Event()

    try:
        with out.status("Discovering DynamoDB tables..."):
            report = task.collect(cancel)
    except KeyboardInterrupt as exc:
        cancel.set()
        exit_from_exc(exc, message="Cancelled; nothing was submitted.", code=130)
    except SyncCancelledError as exc:
        exit_from_exc(exc, message=str(exc), code=130)
    except SyncError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if as_json:
        out.json(task.mutation_for(report.entities).to_dict())
    else:
        _show_report(appctx, report)

    if dry_run:
        ok_exit("Dry run: no mutation submitted.")

    if confirm and not out.confirm(
        f"Replace all entities under {report.location_key} "
        f"with {len(report.entities)} entities?",
        default=False,
    ):
        ok_exit("Aborted.")

    try:
        with out.status("Submitting mutation..."):
            report = task.submit(report)
    except SyncError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.success(
        f"Submitted {len(report.entities)} entities under {report.location_key}"
    )
    if report.failures:
        out.warn(
            f"{len(report.failures)} tables could not be described and were omitted."
        )

"""DynamoDB table discovery into the software catalog.

This module holds the sync task: resolve credentials, list the tables of one
account, describe them in parallel, map the descriptions to catalog entities
and submit the complete set as a single full-replacement mutation.

Collaborators (credentials, inventory API, catalog connection) are injected,
so the task itself carries no state between runs and performs no I/O of its
own.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Mapping, Protocol

from botocore.exceptions import BotoCoreError

from catalogsync.core.adapters.dynamodb import DynamoDbInventory
from catalogsync.core.auth import AwsCredentials, CredentialResolver, get_client
from catalogsync.core.config import ProviderConfig, SyncSettings
from catalogsync.core.entities import (
    CatalogEntity,
    DeferredEntity,
    EntityMutation,
    TableDescription,
    default_annotations,
    location_key,
    provider_name,
    table_to_entity,
)
from catalogsync.core.errors import (
    DescribeError,
    ListError,
    NotInitializedError,
    SyncCancelledError,
)
from catalogsync.core.fanout import gather_partitioned

logger = logging.getLogger(__name__)


class TableInventory(Protocol):
    """Interface for the remote table inventory."""

    def list_tables(self) -> list[str]:
        """Return all table names, or raise ListError."""
        ...

    def describe_table(self, name: str) -> TableDescription | None:
        """Describe one table; None means not found."""
        ...


class CatalogConnection(Protocol):
    """Interface for the catalog ingestion endpoint."""

    def apply_mutation(self, mutation: EntityMutation) -> None:
        """Apply a mutation, or raise SubmissionError."""
        ...


InventoryFactory = Callable[[AwsCredentials], TableInventory]


@dataclass(frozen=True)
class SyncReport:
    """
    Outcome of a single sync run.

    Attributes:
        provider_name: Name of the provider that produced the entities.
        location_key: Key every entity was submitted under.
        identifiers: Table names returned by the listing.
        entities: Entities included in the mutation.
        failures: Per-table describe errors; those tables were omitted.
        skipped: Tables that were not found or lacked a name/ARN.
        submitted: False for dry runs.
    """

    provider_name: str
    location_key: str
    identifiers: list[str]
    entities: list[CatalogEntity]
    failures: list[DescribeError] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    submitted: bool = True


def dynamodb_inventory_factory(
    config: ProviderConfig, *, timeout: float
) -> InventoryFactory:
    """Return a factory building a boto3-backed inventory from credentials."""

    def _build(credentials: AwsCredentials) -> TableInventory:
        try:
            client = get_client(
                "dynamodb", credentials, config.region, timeout=timeout
            )
        except BotoCoreError as exc:
            raise ListError(
                f"Cannot create DynamoDB client for region {config.region}: {exc}"
            ) from exc
        return DynamoDbInventory(client)

    return _build


class DynamoDbTableSync:
    """Provides catalog entities for the DynamoDB tables of one AWS account."""

    def __init__(
        self,
        config: ProviderConfig,
        credentials: CredentialResolver,
        catalog: CatalogConnection | None,
        *,
        inventory_factory: InventoryFactory | None = None,
        annotations: Mapping[str, str] | None = None,
        settings: SyncSettings | None = None,
    ) -> None:
        self.config = config
        self.credentials = credentials
        self.catalog = catalog
        self.settings = settings or SyncSettings()
        self.inventory_factory = inventory_factory or dynamodb_inventory_factory(
            config, timeout=self.settings.timeout
        )
        self._annotations = annotations

    @property
    def provider_name(self) -> str:
        return provider_name(self.config.account_id)

    @property
    def location_key(self) -> str:
        return location_key(self.config.account_id)

    def default_annotations(self) -> dict[str, str]:
        """Return the annotations merged into every entity of this provider."""
        if self._annotations is not None:
            return dict(self._annotations)
        return default_annotations(
            self.provider_name, self.config.role_arn, self.config.account_id
        )

    def collect(self, cancel: threading.Event | None = None) -> SyncReport:
        """
        Discover tables and build entities without submitting anything.

        Raises:
            CredentialsError: If credentials cannot be obtained.
            ListError: If the table listing fails.
            SyncCancelledError: If `cancel` is set during the describe phase.
        """
        credentials = self.credentials.resolve(self.config)
        inventory = self.inventory_factory(credentials)
        annotations = self.default_annotations()

        logger.info(
            "Retrieving all DynamoDB tables for account %s", self.config.account_id
        )
        names = inventory.list_tables()
        logger.info("Found %d DynamoDB tables", len(names))

        outcome = gather_partitioned(
            inventory.describe_table,
            names,
            self.settings.max_parallel,
            cancel=cancel,
        )

        failures: list[DescribeError] = []
        for failure in outcome.failures:
            err = failure.error
            if not isinstance(err, DescribeError):
                err = DescribeError(failure.item, str(err))
            logger.warning("%s", err)
            failures.append(err)

        # entities follow listing order, not completion order
        position = {name: i for i, name in enumerate(names)}
        entities: list[CatalogEntity] = []
        skipped: list[str] = []
        for name, table in sorted(outcome.results, key=lambda r: position[r[0]]):
            entity = (
                table_to_entity(
                    table, owner=self.config.account_id, annotations=annotations
                )
                if table is not None
                else None
            )
            if entity is None:
                logger.debug("Skipping table %s (not found or missing name/ARN)", name)
                skipped.append(name)
                continue
            entities.append(entity)

        return SyncReport(
            provider_name=self.provider_name,
            location_key=self.location_key,
            identifiers=names,
            entities=entities,
            failures=failures,
            skipped=skipped,
            submitted=False,
        )

    def mutation_for(self, entities: list[CatalogEntity]) -> EntityMutation:
        """Wrap entities in a full mutation scoped to this account."""
        key = self.location_key
        return EntityMutation(
            entities=tuple(DeferredEntity(entity=e, location_key=key) for e in entities)
        )

    def run(self, cancel: threading.Event | None = None) -> SyncReport:
        """
        Run one full sync and submit the resulting snapshot.

        Each call produces a fresh full snapshot; an empty table listing still
        submits an empty mutation so previously ingested entities are removed.

        Raises:
            NotInitializedError: If no catalog connection is set.
            CredentialsError: If credentials cannot be obtained.
            ListError: If the table listing fails.
            SyncCancelledError: If `cancel` is set before submission.
            SubmissionError: If the catalog rejects the mutation.
        """
        self._require_catalog()
        report = self.collect(cancel)
        if cancel is not None and cancel.is_set():
            raise SyncCancelledError("Cancelled before submitting the mutation.")
        return self.submit(report)

    def _require_catalog(self) -> CatalogConnection:
        if self.catalog is None:
            raise NotInitializedError("Not initialized: no catalog connection.")
        return self.catalog

    def submit(self, report: SyncReport) -> SyncReport:
        """Submit the entities of a collected report as one full mutation."""
        catalog = self._require_catalog()
        mutation = self.mutation_for(report.entities)

        logger.info(
            "Submitting %d entities under %s", len(mutation.entities), self.location_key
        )
        catalog.apply_mutation(mutation)

        return replace(report, submitted=True)

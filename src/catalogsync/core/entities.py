"""Catalog entity models and the DynamoDB table mapping.

These models describe the wire shape the catalog ingests. They are
intentionally free of boto3 types and CLI concerns; `to_dict()` renders the
exact JSON structure sent to the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

MAX_ENTITY_NAME_LENGTH = 62

ENTITY_KIND = "Component"
ENTITY_API_VERSION = "backstage.io/v1beta1"
ENTITY_TYPE_DYNAMO_DB_TABLE = "dynamo-db-table"
ENTITY_LIFECYCLE = "production"

ANNOTATION_LOCATION = "backstage.io/managed-by-location"
ANNOTATION_ORIGIN_LOCATION = "backstage.io/managed-by-origin-location"
ANNOTATION_ACCOUNT_ID = "amazon.com/account-id"
ANNOTATION_DYNAMO_DB_TABLE_ARN = "amazon.com/dynamo-db-table-arn"


@dataclass(frozen=True)
class TableDescription:
    """Name and ARN of a described DynamoDB table; either may be missing."""

    name: str | None
    arn: str | None


@dataclass(frozen=True)
class CatalogEntity:
    """A catalog Component entity."""

    name: str
    owner: str
    type: str
    annotations: Mapping[str, str] = field(default_factory=dict)
    kind: str = ENTITY_KIND
    api_version: str = ENTITY_API_VERSION
    lifecycle: str = ENTITY_LIFECYCLE

    def to_dict(self) -> dict[str, Any]:
        """Render the entity in catalog wire format."""
        return {
            "kind": self.kind,
            "apiVersion": self.api_version,
            "metadata": {
                "annotations": dict(self.annotations),
                "name": self.name,
            },
            "spec": {
                "owner": self.owner,
                "type": self.type,
                "lifecycle": self.lifecycle,
            },
        }


@dataclass(frozen=True)
class DeferredEntity:
    """An entity paired with the location key that owns it."""

    entity: CatalogEntity
    location_key: str

    def to_dict(self) -> dict[str, Any]:
        return {"entity": self.entity.to_dict(), "locationKey": self.location_key}


@dataclass(frozen=True)
class EntityMutation:
    """
    A full-replacement mutation.

    The receiver treats `entities` as the complete set owned by their
    location key and deletes anything previously submitted under that key
    that is missing here.
    """

    entities: tuple[DeferredEntity, ...] = ()
    type: str = "full"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "entities": [e.to_dict() for e in self.entities],
        }


def provider_name(account_id: str) -> str:
    """Return the provider name for an account."""
    return f"aws-dynamo-db-table-{account_id}"


def location_key(account_id: str) -> str:
    """Return the location key scoping all entities of one account."""
    return f"aws-dynamo-db-table-provider:{account_id}"


def default_annotations(
    provider: str, role_arn: str, account_id: str
) -> dict[str, str]:
    """Return the provenance annotations merged into every entity."""
    return {
        ANNOTATION_LOCATION: f"{provider}:{role_arn}",
        ANNOTATION_ORIGIN_LOCATION: f"{provider}:{role_arn}",
        ANNOTATION_ACCOUNT_ID: account_id,
    }


def truncate_name(name: str, max_len: int = MAX_ENTITY_NAME_LENGTH) -> str:
    """Hard-cut a name to the catalog's maximum length (no ellipsis)."""
    return name[:max_len]


def table_to_entity(
    table: TableDescription,
    *,
    owner: str,
    annotations: Mapping[str, str],
) -> CatalogEntity | None:
    """
    Map a described table to a catalog entity.

    Returns None when the description lacks a name or an ARN; partial
    entities are never produced.
    """
    if not table.name or not table.arn:
        return None
    return CatalogEntity(
        name=truncate_name(table.name),
        owner=owner,
        type=ENTITY_TYPE_DYNAMO_DB_TABLE,
        annotations={
            **annotations,
            ANNOTATION_DYNAMO_DB_TABLE_ARN: table.arn,
        },
    )

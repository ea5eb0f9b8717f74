from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from catalogsync.core.entities import TableDescription
from catalogsync.core.errors import DescribeError, ListError


class DynamoDbInventory:
    """Adapter around the boto3 DynamoDB client (list/describe tables)."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def list_tables(self) -> list[str]:
        """Return the table names from a single ListTables call."""
        try:
            response = self.client.list_tables()
        except (ClientError, BotoCoreError) as exc:
            raise ListError(f"Failed to list DynamoDB tables: {exc}") from exc
        # a response without TableNames means no tables, not an error
        return list(response.get("TableNames") or [])

    def describe_table(self, name: str) -> TableDescription | None:
        """Describe one table, or return None if it no longer exists."""
        try:
            response = self.client.describe_table(TableName=name)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code == "ResourceNotFoundException":
                return None
            raise DescribeError(name, str(exc)) from exc
        except BotoCoreError as exc:
            raise DescribeError(name, str(exc)) from exc

        table = response.get("Table")
        if not table:
            return None
        return TableDescription(
            name=table.get("TableName"),
            arn=table.get("TableArn"),
        )

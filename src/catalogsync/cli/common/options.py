"""Common CLI options for the CLI."""

import typer

from catalogsync.core.config import DEFAULT_MAX_PARALLEL, DEFAULT_TIMEOUT_SECONDS

ConfigOpt = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML file with accountId/roleArn/externalId/region",
    exists=True,
    dir_okay=False,
    readable=True,
)

AccountIdOpt = typer.Option(
    None,
    "--account-id",
    envvar="CATALOGSYNC_ACCOUNT_ID",
    help="AWS account id (overrides the config file)",
)

RoleArnOpt = typer.Option(
    None,
    "--role-arn",
    envvar="CATALOGSYNC_ROLE_ARN",
    help="IAM role to assume for reading the inventory",
)

ExternalIdOpt = typer.Option(
    None,
    "--external-id",
    envvar="CATALOGSYNC_EXTERNAL_ID",
    help="External id required by the role trust policy",
)

RegionOpt = typer.Option(
    None,
    "--region",
    envvar="CATALOGSYNC_REGION",
    help="AWS region of the DynamoDB tables",
)

CatalogUrlOpt = typer.Option(
    None,
    "--catalog-url",
    envvar="CATALOGSYNC_CATALOG_URL",
    help="Catalog ingestion endpoint receiving the mutation",
)

CatalogTokenOpt = typer.Option(
    None,
    "--catalog-token",
    envvar="CATALOGSYNC_CATALOG_TOKEN",
    help="Bearer token for the catalog ingestion endpoint",
)

ParallelOpt = typer.Option(
    DEFAULT_MAX_PARALLEL,
    "--parallel",
    "-n",
    help="Number of tables to describe in parallel",
)

TimeoutOpt = typer.Option(
    DEFAULT_TIMEOUT_SECONDS,
    "--timeout",
    help="Timeout in seconds for each AWS and catalog call",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before replacing the catalog entities",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which entities would be submitted, but don't submit anything",
)

JsonOpt = typer.Option(
    False,
    "--json",
    help="Print the mutation as JSON",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)

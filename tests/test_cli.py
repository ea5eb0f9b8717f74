import json

from typer.testing import CliRunner

from catalogsync.cli import cli
from catalogsync.cli.commands import dynamodb as dynamodb_cmd
from catalogsync.cli.common import context as context_module
from catalogsync.cli.common.context import SyncAppContext
from catalogsync.cli.common.output import Out
from catalogsync.core import sync as sync_module
from catalogsync.core.adapters.catalog import RecordingCatalogConnection
from catalogsync.core.auth import AwsCredentials
from catalogsync.core.config import SyncSettings
from catalogsync.core.entities import TableDescription
from catalogsync.core.errors import CredentialsError, SyncCancelledError
from catalogsync.core.sync import DynamoDbTableSync

runner = CliRunner()

ORDERS_ARN = "arn:aws:dynamodb:eu-west-1:123456789012:table/orders"


class _Credentials:
    def __init__(self, error=None):
        self.error = error

    def resolve(self, config):
        if self.error:
            raise self.error
        return AwsCredentials(access_key_id="AKIA", secret_access_key="secret")


class _RecordingCredentials(_Credentials):
    def __init__(self):
        super().__init__()
        self.seen = []

    def resolve(self, config):
        self.seen.append(config)
        return super().resolve(config)


class _Inventory:
    def list_tables(self):
        return ["orders"]

    def describe_table(self, name):
        return TableDescription(name=name, arn=ORDERS_ARN)


def _patch_context(monkeypatch, provider_config, credentials=None):
    catalog = RecordingCatalogConnection()
    captured = {}

    def _build(**kwargs):
        captured.update(kwargs)
        task = DynamoDbTableSync(
            provider_config,
            credentials or _Credentials(),
            catalog,
            inventory_factory=lambda creds: _Inventory(),
            settings=SyncSettings(),
        )
        return SyncAppContext(config=provider_config, task=task)

    monkeypatch.setattr(dynamodb_cmd, "build_sync_context", _build)
    return catalog, captured


def test_sync_submits_without_confirmation(monkeypatch, provider_config):
    catalog, captured = _patch_context(monkeypatch, provider_config)

    result = runner.invoke(
        cli.app,
        ["dynamodb", "sync", "--account-id", "123456789012", "--no-confirm"],
    )

    assert result.exit_code == 0, result.output
    assert captured["overrides"]["accountId"] == "123456789012"
    assert [d.entity.name for d in catalog.last.entities] == ["orders"]
    assert "Submitted 1 entities" in result.output


def test_sync_dry_run_json_does_not_submit(monkeypatch, provider_config):
    catalog, _ = _patch_context(monkeypatch, provider_config)

    result = runner.invoke(cli.app, ["dynamodb", "sync", "--dry-run", "--json"])

    assert result.exit_code == 0, result.output
    assert catalog.mutations == []
    text = result.stdout
    payload = json.loads(text[text.index("{") : text.rindex("}") + 1])
    assert payload["type"] == "full"
    assert payload["entities"][0]["entity"]["metadata"]["name"] == "orders"


def test_sync_credentials_error_exits_1(monkeypatch, provider_config):
    catalog, _ = _patch_context(
        monkeypatch, provider_config, credentials=_Credentials(CredentialsError("denied"))
    )

    result = runner.invoke(cli.app, ["dynamodb", "sync", "--no-confirm"])

    assert result.exit_code == 1
    assert "denied" in result.output
    assert catalog.mutations == []


def test_sync_requires_catalog_url(monkeypatch):
    result = runner.invoke(
        cli.app,
        [
            "dynamodb",
            "sync",
            "--account-id",
            "1",
            "--role-arn",
            "r",
            "--region",
            "eu-west-1",
        ],
        env={"CATALOGSYNC_CATALOG_URL": ""},
    )

    assert result.exit_code == 2
    assert "catalog-url" in result.output


def test_sync_declined_confirmation_does_not_submit(monkeypatch, provider_config):
    catalog, _ = _patch_context(monkeypatch, provider_config)
    prompts = []

    def _decline(self, message, *, default=False):
        prompts.append(message)
        return False

    monkeypatch.setattr(Out, "confirm", _decline)

    result = runner.invoke(cli.app, ["dynamodb", "sync"])

    assert result.exit_code == 0, result.output
    assert catalog.mutations == []
    assert "Aborted" in result.output
    assert "aws-dynamo-db-table-provider:123456789012" in prompts[0]


def test_sync_interrupted_exits_130(monkeypatch, provider_config):
    catalog, _ = _patch_context(
        monkeypatch, provider_config, credentials=_Credentials(KeyboardInterrupt())
    )

    result = runner.invoke(cli.app, ["dynamodb", "sync", "--no-confirm"])

    assert result.exit_code == 130
    assert "nothing was submitted" in result.output
    assert catalog.mutations == []


def test_sync_cancelled_exits_130(monkeypatch, provider_config):
    catalog, _ = _patch_context(
        monkeypatch,
        provider_config,
        credentials=_Credentials(SyncCancelledError("stopped")),
    )

    result = runner.invoke(cli.app, ["dynamodb", "sync", "--no-confirm"])

    assert result.exit_code == 130
    assert "stopped" in result.output
    assert catalog.mutations == []


def test_sync_reads_provider_block_from_yaml(monkeypatch, tmp_path):
    path = tmp_path / "app-config.yaml"
    path.write_text(
        "aws:\n"
        "  dynamodb:\n"
        "    accountId: '098765432109'\n"
        "    roleArn: arn:aws:iam::098765432109:role/catalog-reader\n"
        "    region: eu-central-1\n"
    )
    credentials = _RecordingCredentials()

    monkeypatch.setattr(
        context_module, "StsCredentialResolver", lambda timeout: credentials
    )
    monkeypatch.setattr(
        sync_module,
        "dynamodb_inventory_factory",
        lambda config, timeout: (lambda creds: _Inventory()),
    )

    result = runner.invoke(
        cli.app, ["dynamodb", "sync", "--config", str(path), "--dry-run", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert credentials.seen[0].account_id == "098765432109"
    assert credentials.seen[0].region == "eu-central-1"
    text = result.stdout
    payload = json.loads(text[text.index("{") : text.rindex("}") + 1])
    entity = payload["entities"][0]
    assert entity["entity"]["spec"]["owner"] == "098765432109"
    assert entity["locationKey"] == "aws-dynamo-db-table-provider:098765432109"

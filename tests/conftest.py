from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from catalogsync.core.config import ProviderConfig  # noqa: E402

ACCOUNT_ID = "123456789012"
ROLE_ARN = "arn:aws:iam::123456789012:role/catalog-reader"


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(account_id=ACCOUNT_ID, role_arn=ROLE_ARN, region="eu-west-1")


@pytest.fixture(autouse=True)
def _fake_aws_env(monkeypatch):
    # keep boto3 away from real credentials and config files
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_CONFIG_FILE", "/dev/null")
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", "/dev/null")

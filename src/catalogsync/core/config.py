"""Provider configuration.

The provider block uses the same camelCase keys as the catalog app config
(`accountId`, `roleArn`, `externalId`, `region`). It can be read from a
mapping, from a YAML file, or assembled from CLI options.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from catalogsync.core.errors import ConfigError

DEFAULT_MAX_PARALLEL = 5
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ProviderConfig:
    """
    Identity of the AWS account a sync runs against.

    Attributes:
        account_id: AWS account id; also the owner of every emitted entity.
        role_arn: IAM role assumed to read the inventory.
        external_id: Optional external id required by the role trust policy.
        region: AWS region holding the DynamoDB tables.
    """

    account_id: str
    role_arn: str
    region: str
    external_id: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProviderConfig:
        """Build a config from a mapping with `accountId`/`roleArn`/`region` keys."""
        return cls(
            account_id=_get_string(data, "accountId"),
            role_arn=_get_string(data, "roleArn"),
            region=_get_string(data, "region"),
            external_id=_get_optional_string(data, "externalId"),
        )


@dataclass(frozen=True)
class SyncSettings:
    """Tuning knobs for a sync run."""

    max_parallel: int = DEFAULT_MAX_PARALLEL
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.max_parallel < 1:
            raise ConfigError("max_parallel must be >= 1")
        if self.timeout <= 0:
            raise ConfigError("timeout must be > 0")


def _get_optional_string(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    # YAML reads unquoted digits as int (leading-zero ones as octal)
    if not isinstance(value, str):
        raise ConfigError(
            f"Config key '{key}' must be a string; quote the value in YAML "
            f"(e.g. {key}: \"...\")."
        )
    value = value.strip()
    return value or None


def _get_string(data: Mapping[str, Any], key: str) -> str:
    value = _get_optional_string(data, key)
    if value is None:
        raise ConfigError(f"Missing required config key '{key}'.")
    return value


def _provider_block(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the provider block, either top level or under `aws.dynamodb`."""
    aws = payload.get("aws")
    if isinstance(aws, Mapping):
        block = aws.get("dynamodb")
        if isinstance(block, Mapping):
            return block
    return payload


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Read the provider block from a YAML file.

    Returns the raw mapping so callers can overlay CLI options before
    building a `ProviderConfig`.
    """
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping.")
    return dict(_provider_block(payload))


def merge_overrides(
    base: Mapping[str, Any], overrides: Mapping[str, Any | None]
) -> dict[str, Any]:
    """Overlay non-empty override values onto a config mapping."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is not None and value != "":
            merged[key] = value
    return merged

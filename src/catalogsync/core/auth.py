"""Authentication helpers for AWS.

This module resolves short-lived credentials by assuming the configured IAM
role through STS, and builds boto3 clients from them with explicit timeouts
so a hung endpoint cannot stall a sync forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from catalogsync.core.config import DEFAULT_TIMEOUT_SECONDS, ProviderConfig
from catalogsync.core.errors import CredentialsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """Temporary credentials returned by STS AssumeRole."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None
    expiration: datetime | None = None


class CredentialResolver(Protocol):
    """Interface for obtaining credentials for a provider config."""

    def resolve(self, config: ProviderConfig) -> AwsCredentials:
        """Return credentials scoped to the config's role, or raise CredentialsError."""
        ...


def client_config(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Config:
    """Return a botocore config bounding connect and read time to one attempt."""
    return Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"mode": "standard", "max_attempts": 1},
    )


def _format_credentials_error(exc: Exception, config: ProviderConfig) -> str:
    """Return a user-friendly credentials error message."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message", str(exc))
        if code == "AccessDenied":
            hint = "Check the role trust policy"
            if config.external_id:
                hint += " and the configured externalId"
            return (
                f"Not allowed to assume role {config.role_arn}: {message}\n"
                f"{hint}."
            )
        return f"Assuming role {config.role_arn} failed ({code}): {message}"
    return f"Assuming role {config.role_arn} failed: {exc}"


class StsCredentialResolver:
    """Assume the configured IAM role through STS."""

    def __init__(
        self,
        sts_client: Any | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._sts_client = sts_client
        self._timeout = timeout

    def _client(self, config: ProviderConfig) -> Any:
        if self._sts_client is None:
            self._sts_client = boto3.client(
                "sts",
                region_name=config.region,
                config=client_config(self._timeout),
            )
        return self._sts_client

    def resolve(self, config: ProviderConfig) -> AwsCredentials:
        """Assume `config.role_arn` and return the temporary credentials."""
        params: dict[str, Any] = {
            "RoleArn": config.role_arn,
            "RoleSessionName": f"catalogsync-{config.account_id}",
        }
        if config.external_id:
            params["ExternalId"] = config.external_id

        logger.debug("Assuming role %s", config.role_arn)
        try:
            response = self._client(config).assume_role(**params)
        except (ClientError, BotoCoreError) as exc:
            raise CredentialsError(_format_credentials_error(exc, config)) from exc

        creds = response.get("Credentials") or {}
        if not creds.get("AccessKeyId") or not creds.get("SecretAccessKey"):
            raise CredentialsError(
                f"STS returned no credentials for role {config.role_arn}."
            )
        return AwsCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds.get("SessionToken"),
            expiration=creds.get("Expiration"),
        )


def get_client(
    service: str,
    credentials: AwsCredentials,
    region: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """
    Create a boto3 client for `service` from temporary credentials.

    The client is pinned to `region` and uses bounded connect/read timeouts.
    """
    session = boto3.session.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=region,
    )
    return session.client(service, config=client_config(timeout))

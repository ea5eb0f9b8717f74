from __future__ import annotations

import logging
from typing import Any

import requests

from catalogsync.core.config import DEFAULT_TIMEOUT_SECONDS
from catalogsync.core.entities import EntityMutation
from catalogsync.core.errors import SubmissionError

logger = logging.getLogger(__name__)


class HttpCatalogConnection:
    """Submit entity mutations to a catalog ingestion endpoint over HTTP."""

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Any | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def apply_mutation(self, mutation: EntityMutation) -> None:
        """POST the mutation as JSON; any non-2xx answer is a SubmissionError."""
        payload = mutation.to_dict()
        logger.debug(
            "POST %s (%s mutation, %d entities)",
            self.url,
            mutation.type,
            len(mutation.entities),
        )
        try:
            response = self.session.post(
                self.url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SubmissionError(
                f"Catalog rejected {mutation.type} mutation at {self.url}: {exc}"
            ) from exc


class RecordingCatalogConnection:
    """Keep submitted mutations in memory instead of sending them."""

    def __init__(self) -> None:
        self.mutations: list[EntityMutation] = []

    def apply_mutation(self, mutation: EntityMutation) -> None:
        self.mutations.append(mutation)

    @property
    def last(self) -> EntityMutation | None:
        return self.mutations[-1] if self.mutations else None

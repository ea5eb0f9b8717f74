import pytest
import requests

from catalogsync.core.adapters.catalog import HttpCatalogConnection
from catalogsync.core.entities import (
    CatalogEntity,
    DeferredEntity,
    EntityMutation,
)
from catalogsync.core.errors import SubmissionError


class _Response:
    def __init__(self, status_code: int):
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class _Session:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response or _Response(200)
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def _mutation() -> EntityMutation:
    entity = CatalogEntity(name="orders", owner="1", type="dynamo-db-table")
    return EntityMutation(entities=(DeferredEntity(entity=entity, location_key="k"),))


def test_apply_mutation_posts_json_with_token_and_timeout():
    session = _Session()
    conn = HttpCatalogConnection(
        "https://catalog.example.com/ingest/", token="t0k", timeout=3, session=session
    )

    conn.apply_mutation(_mutation())

    call = session.calls[0]
    assert call["url"] == "https://catalog.example.com/ingest"
    assert call["json"] == _mutation().to_dict()
    assert call["headers"]["Authorization"] == "Bearer t0k"
    assert call["timeout"] == 3


def test_apply_mutation_without_token_has_no_auth_header():
    session = _Session()

    HttpCatalogConnection("http://c", session=session).apply_mutation(_mutation())

    assert "Authorization" not in session.calls[0]["headers"]


def test_apply_mutation_http_error_is_submission_error():
    conn = HttpCatalogConnection("http://c", session=_Session(_Response(500)))

    with pytest.raises(SubmissionError, match="500"):
        conn.apply_mutation(_mutation())


def test_apply_mutation_transport_error_is_submission_error():
    session = _Session(error=requests.ConnectionError("refused"))

    with pytest.raises(SubmissionError, match="refused"):
        HttpCatalogConnection("http://c", session=session).apply_mutation(_mutation())

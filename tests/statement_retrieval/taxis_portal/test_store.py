"""Tests for the cache-first document store."""

from pathlib import Path

import pytest
import requests

from statement_retrieval.taxis_portal.errors import FetchFailed
from statement_retrieval.taxis_portal.models import DocumentKey, DocumentKind, StatementRef
from statement_retrieval.taxis_portal.store import DocumentStore

from .conftest import CODEUS, ENDPOINTS, SESSION_TOKEN, FakeTransport

STATEMENT_2020 = StatementRef("120551", 2020)


class TestDocumentStorePaths:
    """Tests for storage layout."""

    def test_details_path(self, store: DocumentStore, temp_dir: Path):
        assert store.path_for(DocumentKey.details(CODEUS)) == temp_dir / "Codeus" / "03091627.htm"

    def test_statement_path(self, store: DocumentStore, temp_dir: Path):
        key = DocumentKey.for_statement(CODEUS, STATEMENT_2020)
        assert store.path_for(key) == temp_dir / "Codeus" / "03091627-2020.html"

    def test_statement_key_requires_statement(self):
        with pytest.raises(ValueError):
            DocumentKey(CODEUS, DocumentKind.STATEMENT)

    def test_list_requests_are_not_documents(self):
        with pytest.raises(ValueError):
            DocumentKey(CODEUS, DocumentKind.STATEMENT_LIST)


class TestDocumentStore:
    """Tests for DocumentStore.get."""

    def test_fetches_and_persists(self, store: DocumentStore, transport: FakeTransport, temp_dir: Path):
        """Test that a missing document is fetched and written verbatim."""
        key = DocumentKey.for_statement(CODEUS, STATEMENT_2020)

        content = store.get(key)

        assert transport.urls == [ENDPOINTS.statement_details("120551")]
        assert (temp_dir / "Codeus" / "03091627-2020.html").read_text(encoding="utf-8") == content
        assert store.contains(key)

    def test_second_get_uses_cache(self, store: DocumentStore, transport: FakeTransport):
        """Test that the same key is fetched only once."""
        key = DocumentKey.for_statement(CODEUS, STATEMENT_2020)

        first = store.get(key)
        second = store.get(key)

        assert first == second
        assert len(transport.calls) == 1

    def test_existing_file_is_not_fetched(self, store: DocumentStore, transport: FakeTransport, temp_dir: Path):
        """Test that a document already on disk is returned without a request."""
        entity_dir = temp_dir / "Codeus"
        entity_dir.mkdir()
        (entity_dir / "03091627-2020.html").write_text("<html>cached</html>", encoding="utf-8")

        content = store.get(DocumentKey.for_statement(CODEUS, STATEMENT_2020))

        assert content == "<html>cached</html>"
        assert transport.calls == []

    def test_cached_content_round_trips_exactly(self, temp_dir: Path):
        """Test that line endings and non-ASCII text survive the cache."""
        body = "<td>Prosječan broj zaposlenih</td>\r\n<td>troškovi</td>\r\n"
        transport = FakeTransport({ENDPOINTS.entity_details(CODEUS.tax_id): body})
        store = DocumentStore(temp_dir, transport, SESSION_TOKEN, endpoints=ENDPOINTS)
        key = DocumentKey.details(CODEUS)

        assert store.get(key) == body
        assert store.get(key) == body
        assert len(transport.calls) == 1

    def test_stores_response_bytes_unchanged(self, temp_dir: Path):
        """Test that the file on disk holds exactly the bytes the portal sent."""
        served = "<td>a) Neto troškovi zarada</td>\r\n<td>Prosječan</td>".encode("utf-8")
        transport = FakeTransport({ENDPOINTS.statement_details("120551"): served})
        store = DocumentStore(temp_dir, transport, SESSION_TOKEN, endpoints=ENDPOINTS)

        content = store.get(DocumentKey.for_statement(CODEUS, STATEMENT_2020))

        assert (temp_dir / "Codeus" / "03091627-2020.html").read_bytes() == served
        assert content == served.decode("utf-8")

    def test_sends_session_cookie(self, store: DocumentStore, transport: FakeTransport):
        store.get(DocumentKey.details(CODEUS))

        _, headers = transport.calls[0]
        assert headers["Cookie"] == f"taxisSession={SESSION_TOKEN}"

    def test_fetch_failure_raises_and_writes_nothing(self, temp_dir: Path):
        """Test that a failed request surfaces as FetchFailed with no file left behind."""
        url = ENDPOINTS.statement_details("120551")
        transport = FakeTransport(errors={url: requests.ConnectionError("connection reset")})
        store = DocumentStore(temp_dir, transport, SESSION_TOKEN, endpoints=ENDPOINTS)
        key = DocumentKey.for_statement(CODEUS, STATEMENT_2020)

        with pytest.raises(FetchFailed) as exc_info:
            store.get(key)

        assert exc_info.value.entity == CODEUS
        assert exc_info.value.document_kind is DocumentKind.STATEMENT
        assert exc_info.value.retryable is True
        assert not store.contains(key)
        assert list(temp_dir.rglob("*.part")) == []

    def test_failure_is_not_cached(self, temp_dir: Path):
        """Test that a later get retries a document whose fetch failed."""
        url = ENDPOINTS.statement_details("120551")
        transport = FakeTransport({url: "<html>ok</html>"}, errors={url: requests.Timeout("timed out")})
        store = DocumentStore(temp_dir, transport, SESSION_TOKEN, endpoints=ENDPOINTS)
        key = DocumentKey.for_statement(CODEUS, STATEMENT_2020)

        with pytest.raises(FetchFailed):
            store.get(key)
        del transport.errors[url]

        assert store.get(key) == "<html>ok</html>"
        assert len(transport.calls) == 2

    def test_http_client_error_not_retryable(self, temp_dir: Path):
        store = DocumentStore(temp_dir, FakeTransport(), SESSION_TOKEN, endpoints=ENDPOINTS)

        with pytest.raises(FetchFailed) as exc_info:
            store.get(DocumentKey.details(CODEUS))

        assert exc_info.value.retryable is False

"""
Cache-first storage of portal documents.

Documents are kept under one folder per entity:

    <base_dir>/<display_name>/<tax_id>.htm          entity details
    <base_dir>/<display_name>/<tax_id>-<year>.html  one statement

A document found on disk is never requested again, so an interrupted run can
simply be restarted.
"""

from pathlib import Path

import requests

from statement_retrieval.taxis_portal.endpoints import PortalEndpoints
from statement_retrieval.taxis_portal.errors import FetchFailed
from statement_retrieval.taxis_portal.models import DocumentKey, DocumentKind
from statement_retrieval.taxis_portal.transport import Transport, session_headers


class DocumentStore:
    """
    Maps document keys to local files, fetching only what is missing.

    This class handles:
    - Computing the storage path of each document
    - Returning cached content without network access
    - Fetching and persisting missing documents verbatim
    """

    def __init__(
        self,
        base_dir: Path | str,
        transport: Transport,
        session_token: str,
        endpoints: PortalEndpoints | None = None,
        verbose: bool = False,
    ):
        """
        Initialize the document store.

        Args:
            base_dir: Directory holding one folder per entity
            transport: Transport used for cache misses
            session_token: Value of the portal session cookie
            endpoints: URL builder for the portal
            verbose: Whether to print progress messages
        """
        self.base_dir = Path(base_dir)
        self.transport = transport
        self.session_token = session_token
        self.endpoints = endpoints or PortalEndpoints()
        self.verbose = verbose

    def _log(self, message: str) -> None:
        """Print a message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def path_for(self, key: DocumentKey) -> Path:
        """Deterministic location of a document on disk."""
        entity_dir = self.base_dir / key.entity.display_name
        if key.kind is DocumentKind.ENTITY_DETAILS:
            return entity_dir / f"{key.entity.tax_id}.htm"
        return entity_dir / f"{key.entity.tax_id}-{key.statement.year}.html"

    def contains(self, key: DocumentKey) -> bool:
        return self.path_for(key).exists()

    def _url_for(self, key: DocumentKey) -> str:
        if key.kind is DocumentKind.ENTITY_DETAILS:
            return self.endpoints.entity_details(key.entity.tax_id)
        return self.endpoints.statement_details(key.statement.statement_number)

    def get(self, key: DocumentKey) -> str:
        """
        Return a document's content, fetching it only if not stored yet.

        Args:
            key: Identifies the entity details page or a statement

        Returns:
            Document text decoded as UTF-8

        Raises:
            FetchFailed: If the document is not cached and the request fails
            UnicodeDecodeError: If the stored bytes are not valid UTF-8
        """
        path = self.path_for(key)
        if path.exists():
            return path.read_bytes().decode("utf-8")

        url = self._url_for(key)
        self._log(f"  Downloading {key.kind.value} to {path}")
        try:
            body = self.transport.post(url, session_headers(self.session_token))
        except requests.RequestException as e:
            raise FetchFailed(key.entity, key.kind, e) from e

        # Written beside the target first, then moved into place
        path.parent.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(path.name + ".part")
        partial.write_bytes(body)
        partial.replace(path)
        return body.decode("utf-8")

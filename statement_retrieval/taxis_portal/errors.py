"""Exceptions raised while talking to the tax portal."""

import requests

from statement_retrieval.taxis_portal.models import DocumentKind, Entity, StatementRef


class PortalError(Exception):
    """Base class for tax-portal retrieval errors."""


class ConfigurationError(PortalError):
    """The entity list or run settings could not be loaded."""


class FetchFailed(PortalError):
    """A portal request failed; scoped to one entity or one document."""

    def __init__(self, entity: Entity, document_kind: DocumentKind, cause: Exception):
        self.entity = entity
        self.document_kind = document_kind
        self.cause = cause
        if entity.display_name:
            subject = f"{entity.display_name} ({entity.tax_id})"
        else:
            subject = f"PIB {entity.tax_id}"
        super().__init__(f"Failed to fetch {document_kind.value} for {subject}: {cause}")

    @property
    def retryable(self) -> bool:
        """Whether a later attempt could plausibly succeed."""
        if isinstance(self.cause, (requests.Timeout, requests.ConnectionError)):
            return True
        if isinstance(self.cause, requests.HTTPError) and self.cause.response is not None:
            return self.cause.response.status_code >= 500
        return False


class IncompleteStatementList(PortalError):
    """A later page of a statement list failed; the earlier pages are kept."""

    def __init__(self, statements: list[StatementRef], cause: FetchFailed):
        self.statements = statements
        self.cause = cause
        super().__init__(f"{cause} (kept {len(statements)} statements from earlier pages)")

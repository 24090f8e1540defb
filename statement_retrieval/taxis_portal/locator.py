"""
Discovery of entities and their financial statements on the tax portal.

Both portal list endpoints answer with JSON; the response shapes are declared
as pydantic models using the portal's PascalCase field names.
"""

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from statement_retrieval.taxis_portal.config import DEFAULT_PAGE_SIZE
from statement_retrieval.taxis_portal.endpoints import PortalEndpoints
from statement_retrieval.taxis_portal.errors import FetchFailed, IncompleteStatementList
from statement_retrieval.taxis_portal.models import DocumentKind, Entity, StatementRef
from statement_retrieval.taxis_portal.transport import Transport, session_headers

DEFAULT_MAX_PAGES = 10


class TaxPayerRow(BaseModel):
    """One row of the taxpayer search grid."""

    model_config = ConfigDict(extra="ignore")

    pib: str = Field(..., alias="Pib")
    naziv: str = Field(..., alias="Naziv")


class GridResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tax_payer_rows: list[TaxPayerRow] = Field(default_factory=list, alias="TaxPayerRows")


class StatementRow(BaseModel):
    """One financial statement listed for a taxpayer."""

    model_config = ConfigDict(extra="ignore")

    fin_statement_number: str = Field(..., alias="FinStatementNumber")
    year: int = Field(..., alias="Year")

    @field_validator("fin_statement_number", mode="before")
    @classmethod
    def _number_as_text(cls, value):
        # Statement numbers come back as JSON numbers on some portal versions
        return str(value) if isinstance(value, int) else value


class StatementListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: list[StatementRow] = Field(default_factory=list)


class StatementLocator:
    """
    Queries the portal for taxpayer matches and statement lists.

    An entity without matches or statements yields an empty list; only
    transport failures raise.
    """

    def __init__(
        self,
        transport: Transport,
        session_token: str,
        endpoints: PortalEndpoints | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
        verbose: bool = False,
    ):
        """
        Initialize the statement locator.

        Args:
            transport: Transport for portal requests
            session_token: Value of the portal session cookie
            endpoints: URL builder for the portal
            page_size: Statements requested per page
            max_pages: Upper bound on pages requested for one entity
            verbose: Whether to print progress messages
        """
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.transport = transport
        self.session_token = session_token
        self.endpoints = endpoints or PortalEndpoints()
        self.page_size = page_size
        self.max_pages = max_pages
        self.verbose = verbose

    def _log(self, message: str) -> None:
        """Print a message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def _post(self, url: str, tax_id: str, kind: DocumentKind) -> bytes:
        try:
            return self.transport.post(url, session_headers(self.session_token, accept_json=True))
        except requests.RequestException as e:
            # Only the tax id is known here; the portal supplies the name
            raise FetchFailed(Entity(tax_id, display_name=""), kind, e) from e

    def list_entity_matches(self, tax_id: str) -> list[Entity]:
        """
        Search the taxpayer grid for a tax id.

        Args:
            tax_id: Tax identifier (PIB)

        Returns:
            Matching entities as named by the portal, possibly empty

        Raises:
            FetchFailed: If the request fails
        """
        body = self._post(
            self.endpoints.entity_search(tax_id),
            tax_id,
            DocumentKind.ENTITY_MATCHES,
        )
        try:
            response = GridResponse.model_validate_json(body)
        except ValidationError as e:
            self._log(f"  Unreadable taxpayer search response for {tax_id}: {e.error_count()} errors")
            return []

        return [Entity(tax_id=row.pib, display_name=row.naziv) for row in response.tax_payer_rows]

    def _fetch_page(self, tax_id: str, skip: int) -> list[StatementRow] | None:
        body = self._post(
            self.endpoints.statement_list(tax_id, skip, self.page_size),
            tax_id,
            DocumentKind.STATEMENT_LIST,
        )
        try:
            return StatementListResponse.model_validate_json(body).data
        except ValidationError as e:
            self._log(f"  Unreadable statement list for {tax_id}: {e.error_count()} errors")
            return None

    def list_statements(self, tax_id: str) -> list[StatementRef]:
        """
        List every statement the portal holds for a tax id.

        Pages are requested until an empty or short page comes back, or a page
        only repeats statements already seen.

        Args:
            tax_id: Tax identifier (PIB)

        Returns:
            StatementRefs in the order the portal lists them

        Raises:
            FetchFailed: If the first page request fails
            IncompleteStatementList: If a later page request fails; carries
                the statements gathered from the earlier pages
        """
        statements: list[StatementRef] = []
        seen: set[str] = set()

        for page in range(self.max_pages):
            try:
                rows = self._fetch_page(tax_id, page * self.page_size)
            except FetchFailed as e:
                if not statements:
                    raise
                self._log(f"  Statement list page {page + 1} failed, keeping {len(statements)} statements")
                raise IncompleteStatementList(statements, e) from e
            if not rows:
                break

            numbers = {row.fin_statement_number for row in rows}
            if page > 0 and numbers <= seen:
                # Portal ignored skip and served an earlier page again
                break
            seen |= numbers
            statements.extend(
                StatementRef(statement_number=row.fin_statement_number, year=row.year) for row in rows
            )

            if len(rows) < self.page_size:
                break

        return statements

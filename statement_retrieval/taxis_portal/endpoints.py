"""URLs of the tax-portal requests."""

from urllib.parse import urlencode

from statement_retrieval.taxis_portal.config import DEFAULT_BASE_URL


class PortalEndpoints:
    """Builds request URLs relative to the portal root."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def _url(self, path: str, params: dict) -> str:
        return f"{self.base_url}/FinancialStatement/{path}?{urlencode(params)}"

    def entity_search(self, tax_id: str) -> str:
        return self._url(
            "Grid",
            {"pib": tax_id, "naziv": "", "orderBy": "naziv", "skip": 0, "take": 1},
        )

    def statement_list(self, tax_id: str, skip: int, take: int) -> str:
        return self._url("TaxPayerStatementsList", {"PIB": tax_id, "skip": skip, "take": take})

    def entity_details(self, tax_id: str) -> str:
        return self._url("TaxPayerStatements", {"pib": tax_id})

    def statement_details(self, statement_number: str) -> str:
        return self._url("Details", {"rbr": statement_number})

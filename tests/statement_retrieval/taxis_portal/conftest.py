"""Shared fixtures for tax-portal retrieval tests."""

import json
from pathlib import Path

import pytest
import requests

from statement_retrieval.taxis_portal.collector import StatementCollector
from statement_retrieval.taxis_portal.endpoints import PortalEndpoints
from statement_retrieval.taxis_portal.locator import StatementLocator
from statement_retrieval.taxis_portal.models import Entity
from statement_retrieval.taxis_portal.store import DocumentStore

SESSION_TOKEN = "ir3pdvm0e20di2u4p2dfh4d4"

CODEUS = Entity("03091627", "Codeus")
INFINUM = Entity("03360962", "Infinum")

PROFIT_LABEL = "IX. Neto sveobuhvatni rezultat (248+259)"
EMPLOYEE_LABEL = "Prosječan broj zaposlenih (na osnovu stanja krajem svakog mjeseca)"
NET_PAY_LABEL = "a) Neto troškovi zarada, naknada zarada i lični rashodi"

ENDPOINTS = PortalEndpoints()


class FakeTransport:
    """
    Transport double answering from a url -> body map and recording calls.

    Text bodies are served UTF-8 encoded, like the portal serves them.
    """

    def __init__(self, responses: dict[str, str | bytes] | None = None, errors: dict[str, Exception] | None = None):
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.calls: list[tuple[str, dict[str, str]]] = []

    def post(self, url: str, headers: dict[str, str]) -> bytes:
        self.calls.append((url, headers))
        if url in self.errors:
            raise self.errors[url]
        if url not in self.responses:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        body = self.responses[url]
        return body.encode("utf-8") if isinstance(body, str) else body

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


def canonical_row(code: str, value: int, label: str = "Stavka") -> str:
    """A statement row in the canonical layout."""
    return (
        "<tr>\n"
        f'    <td style="text-align: left">{label}</td>\n'
        f'    <td style="text-align: center;">{code}</td>\n'
        "    <td></td>\n"
        f'    <td style="text-align: right; padding-right: 8px">{value}</td>\n'
        '    <td style="text-align: right; padding-right: 8px">0</td>\n'
        "</tr>\n"
    )


def styled_row(code: str, value: int, label: str = "I. Poslovni prihodi") -> str:
    """A statement row whose cells carry extra attributes."""
    return (
        '<tr class="row-odd">\n'
        f'    <td class="cell" style="text-align: left; font-weight: bold">{label}</td>\n'
        f'    <td class="cell code" style="text-align: center; width: 40px">{code}</td>\n'
        '    <td class="cell notes" style="width: 40px">&nbsp;</td>\n'
        '    <td class="cell amount" style="text-align: right; padding-right: 8px; white-space: nowrap">'
        f"{value}</td>\n"
        "</tr>\n"
    )


def statement_html(
    total_income: int | None = None,
    profit: int | None = None,
    employee_count: int | None = None,
    net_pay_costs: int | None = None,
    extra_rows: str = "",
) -> str:
    """Build a statement document containing only the requested rows."""
    rows = []
    if total_income is not None:
        rows.append(canonical_row("201", total_income, "A. POSLOVNI PRIHODI"))
    if net_pay_costs is not None:
        rows.append(canonical_row("212", net_pay_costs, NET_PAY_LABEL))
    if profit is not None:
        rows.append(canonical_row("260", profit, PROFIT_LABEL))
    if employee_count is not None:
        rows.append(canonical_row("001", employee_count, EMPLOYEE_LABEL))
    return (
        "<html>\n<body>\n<table>\n"
        + "".join(rows)
        + extra_rows
        + "</table>\n</body>\n</html>\n"
    )


def grid_json(*entities: Entity) -> str:
    return json.dumps({"TaxPayerRows": [{"Pib": e.tax_id, "Naziv": e.display_name} for e in entities]})


def statements_json(*rows: tuple[str, int]) -> str:
    return json.dumps({"data": [{"FinStatementNumber": number, "Year": str(year)} for number, year in rows]})


CODEUS_STATEMENTS = [
    ("120551", 2020),
    ("98214", 2019),
    ("77310", 2018),
    ("51902", 2017),
    ("30417", 2016),
]


def codeus_responses() -> dict[str, str]:
    """Portal answers for Codeus with five yearly statements, newest first."""
    responses = {
        ENDPOINTS.entity_search(CODEUS.tax_id): grid_json(Entity(CODEUS.tax_id, "CODEUS DOO")),
        ENDPOINTS.entity_details(CODEUS.tax_id): "<html><body>CODEUS DOO</body></html>",
        ENDPOINTS.statement_list(CODEUS.tax_id, 0, 20): statements_json(*CODEUS_STATEMENTS),
    }
    for number, year in CODEUS_STATEMENTS:
        index = year - 2015
        responses[ENDPOINTS.statement_details(number)] = statement_html(
            total_income=100000 * index,
            profit=10000 * index,
            employee_count=index,
            net_pay_costs=12000 * index if year >= 2020 else None,
        )
    return responses


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Directory for cached statement documents."""
    return tmp_path


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(codeus_responses())


@pytest.fixture
def store(temp_dir: Path, transport: FakeTransport) -> DocumentStore:
    return DocumentStore(temp_dir, transport, SESSION_TOKEN, endpoints=ENDPOINTS)


@pytest.fixture
def locator(transport: FakeTransport) -> StatementLocator:
    return StatementLocator(transport, SESSION_TOKEN, endpoints=ENDPOINTS)


@pytest.fixture
def collector(locator: StatementLocator, store: DocumentStore) -> StatementCollector:
    return StatementCollector(entities=(CODEUS,), locator=locator, store=store)

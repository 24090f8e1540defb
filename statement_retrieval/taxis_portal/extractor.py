"""
Field extraction from statement documents.

A statement is an HTML form in which every amount sits in a table row keyed by
a fixed line code (201 total income, 260 net comprehensive result, 001 average
employee count, 212 net pay costs). Filings from different years render the
cells around the code differently, so each field has an ordered list of rules:
a strict rule matching the canonical layout, then (for most fields) a looser
rule that accepts arbitrary cell attributes.

A rule capturing ``0`` does not stop the search; the next rule is tried. This
means a genuine zero is indistinguishable from a miss when a later rule
matches something else. Existing reports depend on this, so it stays.
"""

import re
from dataclasses import dataclass

from statement_retrieval.taxis_portal.models import ExtractedFields

TOTAL_INCOME = "total_income"
PROFIT = "profit"
EMPLOYEE_COUNT = "employee_count"
NET_PAY_COSTS = "net_pay_costs"

_NOTES_CELL = r"(?:<td></td>\s*)?"
_VALUE_CELL = r'<td style="text-align: right; padding-right: 8px">(?P<value>\d+)</td>'

# Codes 001 and 212 also occur in other sections of a filing
_EMPLOYEE_LABEL = r"Prosje[^<]+an broj zaposlenih[^<]*"
_NET_PAY_LABEL = r"a\) Neto troškovi zarada, naknada zarada i lični rashodi"


def _code_cell(code: str) -> str:
    return rf'<td style="text-align: center;">{code}</td>\s*'


def _label_cell(label: str) -> str:
    return rf'<td style="text-align: left">{label}</td>\s*'


def canonical_row(code: str, label: str | None = None) -> re.Pattern:
    """Row in the canonical layout: [label], code, empty notes cell, value."""
    prefix = _label_cell(label) if label else ""
    return re.compile(prefix + _code_cell(code) + _NOTES_CELL + _VALUE_CELL)


def attribute_tolerant_row(code: str, label: str | None = None) -> re.Pattern:
    """[Label], code, optional notes cell and value cell, each with any attributes."""
    prefix = rf"<td[^>]*>\s*{label}\s*</td>\s*" if label else ""
    return re.compile(
        prefix
        + rf"<td[^>]*>\s*{code}\s*</td>\s*"
        r"(?:<td[^>]*>(?:(?!</td>)[\s\S])*</td>\s*)?"
        r"<td[^>]*>\s*(?P<value>\d+)\s*</td>"
    )


@dataclass(frozen=True)
class ExtractionRule:
    """A named pattern whose ``value`` group holds the amount."""

    name: str
    pattern: re.Pattern

    def __call__(self, text: str) -> int | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        return int(match.group("value"))


FIELD_RULES: dict[str, tuple[ExtractionRule, ...]] = {
    TOTAL_INCOME: (
        ExtractionRule("canonical", canonical_row("201")),
        ExtractionRule("attribute-tolerant", attribute_tolerant_row("201")),
    ),
    # No layout fallback for 260: the label anchor is what makes it unique
    PROFIT: (
        ExtractionRule(
            "canonical",
            canonical_row("260", label=r"IX\. Neto sveobuhvatni rezultat \(248\+259\)"),
        ),
    ),
    EMPLOYEE_COUNT: (
        ExtractionRule("canonical", canonical_row("001", label=_EMPLOYEE_LABEL)),
        ExtractionRule("attribute-tolerant", attribute_tolerant_row("001", label=_EMPLOYEE_LABEL)),
    ),
    NET_PAY_COSTS: (
        ExtractionRule("canonical", canonical_row("212", label=_NET_PAY_LABEL)),
        ExtractionRule("attribute-tolerant", attribute_tolerant_row("212", label=_NET_PAY_LABEL)),
    ),
}


def resolve_field(text: str, rules: tuple[ExtractionRule, ...]) -> int | None:
    """
    Apply rules in order and return the first non-zero value.

    Returns 0 if some rule matched only zeros, None if no rule matched.
    """
    found = None
    for rule in rules:
        value = rule(text)
        if value:
            return value
        if value is not None:
            found = 0
    return found


def average_monthly_pay(net_pay_costs: int, employee_count: int) -> float:
    """Net pay per employee per month; 0 when there are no employees."""
    if employee_count <= 0:
        return 0.0
    return net_pay_costs / employee_count / 12


class FieldExtractor:
    """Extracts report fields from a statement document's HTML."""

    def __init__(self, rules: dict[str, tuple[ExtractionRule, ...]] | None = None):
        self.rules = rules if rules is not None else FIELD_RULES

    def extract(self, text: str) -> ExtractedFields:
        """
        Extract the four amounts and the derived average pay.

        Fields whose rules all fail resolve to 0 and are listed in
        ``ExtractedFields.missing``.
        """
        values: dict[str, int] = {}
        missing: list[str] = []
        for name, rules in self.rules.items():
            value = resolve_field(text, rules)
            if value is None:
                missing.append(name)
                value = 0
            values[name] = value

        net_pay_costs = values.get(NET_PAY_COSTS, 0)
        employee_count = values.get(EMPLOYEE_COUNT, 0)
        # Filings before 2020 have no net pay line
        if NET_PAY_COSTS in missing:
            average_pay = 0.0
        else:
            average_pay = average_monthly_pay(net_pay_costs, employee_count)

        return ExtractedFields(
            total_income=values.get(TOTAL_INCOME, 0),
            profit=values.get(PROFIT, 0),
            employee_count=employee_count,
            net_pay_costs=net_pay_costs,
            average_pay=average_pay,
            missing=tuple(missing),
        )

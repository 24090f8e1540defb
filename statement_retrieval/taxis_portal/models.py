"""
Data models for tax-portal statement retrieval.

Entities, statement references and cache keys describe what to fetch; extracted
fields, report records and per-entity results describe what came back.
"""

from dataclasses import dataclass, field
from enum import Enum


class DocumentKind(str, Enum):
    """Kinds of portal requests; the last two are cached as documents."""

    ENTITY_MATCHES = "entity-matches"
    STATEMENT_LIST = "statement-list"
    ENTITY_DETAILS = "entity-details"
    STATEMENT = "statement"


@dataclass(frozen=True)
class Entity:
    """A taxpayer identified by its tax id (PIB)."""

    tax_id: str
    display_name: str


@dataclass(frozen=True)
class StatementRef:
    """One financial statement listed for an entity."""

    statement_number: str
    year: int


@dataclass(frozen=True)
class DocumentKey:
    """Identifies one cached document: an entity's details page or a statement."""

    entity: Entity
    kind: DocumentKind
    statement: StatementRef | None = None

    def __post_init__(self) -> None:
        if self.kind is DocumentKind.STATEMENT and self.statement is None:
            raise ValueError("Statement documents need a StatementRef")
        if self.kind not in (DocumentKind.ENTITY_DETAILS, DocumentKind.STATEMENT):
            raise ValueError(f"{self.kind.value} is not a cacheable document kind")

    @classmethod
    def details(cls, entity: Entity) -> "DocumentKey":
        return cls(entity, DocumentKind.ENTITY_DETAILS)

    @classmethod
    def for_statement(cls, entity: Entity, statement: StatementRef) -> "DocumentKey":
        return cls(entity, DocumentKind.STATEMENT, statement)


@dataclass
class ExtractedFields:
    """Values pulled out of one statement document."""

    total_income: int = 0
    profit: int = 0
    employee_count: int = 0
    net_pay_costs: int = 0
    average_pay: float = 0.0
    missing: tuple[str, ...] = ()


@dataclass
class FinancialRecord:
    """One report row: an entity's figures for one statement year."""

    entity_name: str
    year: int
    total_income: int
    profit: int
    employee_count: int
    net_pay_costs: int
    average_pay: float

    @classmethod
    def from_fields(cls, entity_name: str, year: int, fields: ExtractedFields) -> "FinancialRecord":
        return cls(
            entity_name=entity_name,
            year=year,
            total_income=fields.total_income,
            profit=fields.profit,
            employee_count=fields.employee_count,
            net_pay_costs=fields.net_pay_costs,
            average_pay=fields.average_pay,
        )

    def to_row(self) -> list:
        """Values in report column order."""
        return [
            self.entity_name,
            self.year,
            self.total_income,
            self.profit,
            self.employee_count,
            self.net_pay_costs,
            self.average_pay,
        ]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.entity_name,
            "Year": self.year,
            "totalIncome": self.total_income,
            "profit": self.profit,
            "employeeCount": self.employee_count,
            "netPayCosts": self.net_pay_costs,
            "averagePay": self.average_pay,
        }


@dataclass
class EntityResult:
    """Result of processing one entity with detailed tracking."""

    entity: Entity
    matches: list[Entity] = field(default_factory=list)
    statements_found: int = 0
    records: list[FinancialRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every discovered statement produced a record."""
        return not self.errors

    @property
    def records_processed(self) -> int:
        return len(self.records)

    @property
    def statements_failed(self) -> int:
        return self.statements_found - len(self.records)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "tax_id": self.entity.tax_id,
            "name": self.entity.display_name,
            "success": self.success,
            "matches": [m.display_name for m in self.matches],
            "statements_found": self.statements_found,
            "records_processed": self.records_processed,
            "errors": list(self.errors),
            "records": [r.to_dict() for r in self.records],
        }

"""
Statement collection across all configured entities.

This module drives discovery, cache-first download and extraction for each
entity, accumulating one record per processed statement.
"""

from statement_retrieval.taxis_portal.errors import IncompleteStatementList, PortalError
from statement_retrieval.taxis_portal.extractor import FieldExtractor
from statement_retrieval.taxis_portal.locator import StatementLocator
from statement_retrieval.taxis_portal.models import (
    DocumentKey,
    Entity,
    EntityResult,
    FinancialRecord,
    StatementRef,
)
from statement_retrieval.taxis_portal.report import CsvReportWriter, ReportAccumulator
from statement_retrieval.taxis_portal.store import DocumentStore

# Errors confined to a single document: network failures and unreadable cache files
ITEM_ERRORS = (PortalError, OSError, UnicodeDecodeError)


class StatementCollector:
    """
    Collects financial records for a fixed list of entities.

    This class coordinates:
    - Looking up each entity and its statements via StatementLocator
    - Materializing documents through the cache-first DocumentStore
    - Extracting fields with FieldExtractor into the ReportAccumulator

    A failure confined to one entity or one statement is recorded on that
    entity's result and the run moves on.
    """

    def __init__(
        self,
        entities: tuple[Entity, ...],
        locator: StatementLocator,
        store: DocumentStore,
        extractor: FieldExtractor | None = None,
        report: ReportAccumulator | None = None,
        verbose: bool = False,
    ):
        """
        Initialize the collector.

        Args:
            entities: Entities to process, in order
            locator: Discovers matches and statements
            store: Cache-first document store
            extractor: Field extractor for statement documents
            report: Accumulator receiving one record per statement
            verbose: Whether to print progress messages
        """
        self.entities = tuple(entities)
        self.locator = locator
        self.store = store
        self.extractor = extractor or FieldExtractor()
        self.report = report if report is not None else ReportAccumulator()
        self.verbose = verbose

    def _log(self, message: str) -> None:
        """Print a message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def _confirm_entity(self, entity: Entity, result: EntityResult) -> None:
        try:
            result.matches = self.locator.list_entity_matches(entity.tax_id)
        except PortalError as e:
            self._log(f"  Taxpayer search failed: {e}")
            result.errors.append(str(e))
            return

        if result.matches:
            for match in result.matches:
                self._log(f"  Found: {match.tax_id} - {match.display_name}")
        else:
            self._log(f"  No taxpayer found for PIB {entity.tax_id}")

    def _fetch_details(self, entity: Entity, result: EntityResult) -> None:
        try:
            self.store.get(DocumentKey.details(entity))
        except ITEM_ERRORS as e:
            self._log(f"  Entity details unavailable: {e}")
            result.errors.append(str(e))

    def process_statement(self, entity: Entity, statement: StatementRef) -> FinancialRecord:
        """
        Materialize one statement document and turn it into a record.

        Raises:
            FetchFailed: If the document is not cached and cannot be fetched
        """
        document = self.store.get(DocumentKey.for_statement(entity, statement))
        fields = self.extractor.extract(document)
        if fields.missing:
            self._log(f"  Not found in {statement.year} statement: {', '.join(fields.missing)}")
        self._log(
            f"  Loaded - totalIncome: {fields.total_income}, profit: {fields.profit}, "
            f"employees: {fields.employee_count}, netPayCosts: {fields.net_pay_costs}"
        )
        return FinancialRecord.from_fields(entity.display_name, statement.year, fields)

    def process_entity(self, entity: Entity) -> EntityResult:
        """
        Process every statement of one entity.

        Args:
            entity: The entity to process

        Returns:
            EntityResult with the records produced and any per-item errors
        """
        result = EntityResult(entity=entity)
        self._log(f"\nCollecting data for: {entity.display_name} ({entity.tax_id})")

        self._confirm_entity(entity, result)
        self._fetch_details(entity, result)

        try:
            statements = self.locator.list_statements(entity.tax_id)
        except IncompleteStatementList as e:
            self._log(f"  Statement list incomplete: {e}")
            result.errors.append(str(e))
            statements = e.statements
        except PortalError as e:
            self._log(f"  Statement list failed: {e}")
            result.errors.append(str(e))
            return result

        result.statements_found = len(statements)
        self._log(f"  Found {len(statements)} financial statements")

        for statement in statements:
            self._log(f"  Processing statement no. {statement.statement_number} for year {statement.year}")
            try:
                record = self.process_statement(entity, statement)
            except ITEM_ERRORS as e:
                self._log(f"  Failed: {e}")
                result.errors.append(str(e))
                continue

            self.report.append(record)
            result.records.append(record)

        return result

    def collect(self, writer: CsvReportWriter | None = None) -> list[EntityResult]:
        """
        Process all entities in order.

        Args:
            writer: Optional open report writer; each entity's rows are
                written as soon as the entity is done

        Returns:
            List of EntityResult objects, one per entity
        """
        results: list[EntityResult] = []
        for entity in self.entities:
            result = self.process_entity(entity)
            results.append(result)
            if writer is not None and result.records:
                writer.write(result.records)

        failed = sum(len(r.errors) for r in results)
        self._log(f"\nDone: {len(self.report)} records, {failed} failed items")
        return results

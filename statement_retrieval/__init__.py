"""
Financial statement retrieval from public tax portals.

Downloads statement documents into a local cache and extracts key figures
into a CSV report.
"""

from statement_retrieval.taxis_portal import (
    DocumentStore,
    FieldExtractor,
    FinancialRecord,
    StatementCollector,
    StatementLocator,
)

__all__ = [
    "DocumentStore",
    "FieldExtractor",
    "FinancialRecord",
    "StatementCollector",
    "StatementLocator",
]

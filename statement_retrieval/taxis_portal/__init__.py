"""
Tax-portal financial statement retrieval and parsing module.

Provides utilities for locating statements on the tax portal, caching each
document locally, extracting financial fields and accumulating a report.
"""

from statement_retrieval.taxis_portal.models import (
    DocumentKey,
    DocumentKind,
    Entity,
    EntityResult,
    ExtractedFields,
    FinancialRecord,
    StatementRef,
)
from statement_retrieval.taxis_portal.errors import (
    ConfigurationError,
    FetchFailed,
    IncompleteStatementList,
    PortalError,
)
from statement_retrieval.taxis_portal.extractor import FieldExtractor
from statement_retrieval.taxis_portal.locator import StatementLocator
from statement_retrieval.taxis_portal.report import CsvReportWriter, ReportAccumulator
from statement_retrieval.taxis_portal.store import DocumentStore
from statement_retrieval.taxis_portal.collector import StatementCollector

__all__ = [
    "DocumentKey",
    "DocumentKind",
    "Entity",
    "EntityResult",
    "ExtractedFields",
    "FinancialRecord",
    "StatementRef",
    "ConfigurationError",
    "FetchFailed",
    "IncompleteStatementList",
    "PortalError",
    "FieldExtractor",
    "StatementLocator",
    "CsvReportWriter",
    "ReportAccumulator",
    "DocumentStore",
    "StatementCollector",
]

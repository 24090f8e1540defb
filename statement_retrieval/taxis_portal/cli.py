"""
Command-line interface for tax-portal statement retrieval.

Usage:
    uv run python -m statement_retrieval.taxis_portal.cli
    uv run python -m statement_retrieval.taxis_portal.cli --tax-id 03091627 -o statements
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console

from statement_retrieval.taxis_portal.collector import StatementCollector
from statement_retrieval.taxis_portal.config import DEFAULT_REPORT_NAME, PortalSettings
from statement_retrieval.taxis_portal.endpoints import PortalEndpoints
from statement_retrieval.taxis_portal.entities import load_entities, select_entities
from statement_retrieval.taxis_portal.errors import ConfigurationError
from statement_retrieval.taxis_portal.locator import StatementLocator
from statement_retrieval.taxis_portal.report import CsvReportWriter
from statement_retrieval.taxis_portal.store import DocumentStore
from statement_retrieval.taxis_portal.transport import HttpTransport


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download financial statements from the tax portal and build a CSV report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run python -m statement_retrieval.taxis_portal.cli
  uv run python -m statement_retrieval.taxis_portal.cli --tax-id 03091627
  uv run python -m statement_retrieval.taxis_portal.cli --entities companies.json -o statements
        """,
    )
    parser.add_argument(
        "--session",
        "-s",
        help="taxisSession cookie value (default: TAXIS_SESSION from environment)",
    )
    parser.add_argument(
        "--entities",
        "-e",
        type=Path,
        help="JSON file mapping tax id to company name (default: built-in list)",
    )
    parser.add_argument(
        "--tax-id",
        "-t",
        action="append",
        dest="tax_ids",
        help="Only process this tax id (repeatable)",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=Path("."),
        help="Directory for per-company statement folders (default: .)",
    )
    parser.add_argument(
        "--report",
        "-r",
        type=Path,
        default=Path(DEFAULT_REPORT_NAME),
        help=f"CSV report path (default: {DEFAULT_REPORT_NAME})",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="Statements requested per page (default: TAXIS_PAGE_SIZE or 20)",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        help="Also write a JSON summary of every company's result to this path",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the statement retrieval CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = PortalSettings.from_env(
            session_token=args.session,
            output_dir=args.output_dir,
            report_path=args.report,
            page_size=args.page_size,
        )
        entities = select_entities(load_entities(args.entities), args.tax_ids)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print(f"\n[bold cyan]Processing {len(entities)} companies[/bold cyan]\n")

    endpoints = PortalEndpoints(settings.base_url)
    transport = HttpTransport(timeout=settings.timeout, request_delay=settings.request_delay)
    collector = StatementCollector(
        entities=entities,
        locator=StatementLocator(
            transport,
            settings.session_token,
            endpoints=endpoints,
            page_size=settings.page_size,
            verbose=True,
        ),
        store=DocumentStore(
            settings.output_dir,
            transport,
            settings.session_token,
            endpoints=endpoints,
            verbose=True,
        ),
        verbose=True,  # Always verbose for CLI
    )

    try:
        with CsvReportWriter(settings.report_path) as writer:
            results = collector.collect(writer)
    finally:
        transport.close()

    # Print summary
    successful = sum(1 for r in results if r.success)
    failed = sum(1 for r in results if not r.success)

    console.print(f"\n[bold]Processing Summary:[/bold]")
    console.print(f"  Records: {len(collector.report)}")
    console.print(f"  Companies complete: [green]{successful}[/green]")
    console.print(f"  Companies with errors: [red]{failed}[/red]")
    console.print(f"  Statements stored in: {settings.output_dir.absolute()}")
    console.print(f"  Report: {settings.report_path.absolute()}")

    if args.summary is not None:
        args.summary.parent.mkdir(parents=True, exist_ok=True)
        summary = [result.to_dict() for result in results]
        args.summary.write_text(json.dumps(summary, indent=4, ensure_ascii=False), encoding="utf-8")
        console.print(f"  Summary: {args.summary.absolute()}")

    # Print any errors
    for result in results:
        for error in result.errors:
            console.print(f"  [red]Error: {error}[/red]")

    return 0


if __name__ == "__main__":
    sys.exit(main())

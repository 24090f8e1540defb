"""
Run settings for the tax-portal retriever.

Values come from the environment (optionally populated from a .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from statement_retrieval.taxis_portal.errors import ConfigurationError

DEFAULT_BASE_URL = "https://eprijava.tax.gov.me/TaxisPortal"
DEFAULT_TIMEOUT = 60.0
DEFAULT_PAGE_SIZE = 20
DEFAULT_REQUEST_DELAY = 0.2
DEFAULT_REPORT_NAME = "Results.csv"


def _env_number(name: str, default: float, cast=float):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class PortalSettings:
    """Immutable settings for one run."""

    session_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    request_delay: float = DEFAULT_REQUEST_DELAY
    output_dir: Path = Path(".")
    report_path: Path = Path(DEFAULT_REPORT_NAME)

    @classmethod
    def from_env(
        cls,
        session_token: str | None = None,
        output_dir: Path | str | None = None,
        report_path: Path | str | None = None,
        page_size: int | None = None,
    ) -> "PortalSettings":
        """
        Build settings from the environment, with explicit overrides.

        Raises:
            ValueError: If no session token is given and TAXIS_SESSION is not set
            ConfigurationError: If a numeric variable cannot be parsed
        """
        load_dotenv(find_dotenv(usecwd=True))

        token = session_token or os.environ.get("TAXIS_SESSION")
        if not token:
            raise ValueError(
                "TAXIS_SESSION environment variable is required. "
                "Add TAXIS_SESSION=<taxisSession cookie value> to your .env file."
            )

        return cls(
            session_token=token,
            base_url=(os.environ.get("TAXIS_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=_env_number("TAXIS_TIMEOUT", DEFAULT_TIMEOUT),
            page_size=page_size or _env_number("TAXIS_PAGE_SIZE", DEFAULT_PAGE_SIZE, int),
            request_delay=_env_number("TAXIS_REQUEST_DELAY", DEFAULT_REQUEST_DELAY),
            output_dir=Path(output_dir) if output_dir is not None else Path("."),
            report_path=Path(report_path) if report_path is not None else Path(DEFAULT_REPORT_NAME),
        )

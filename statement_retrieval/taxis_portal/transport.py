"""
HTTP transport for the tax portal.

Every portal endpoint is a POST with an empty body (sent as Content-Length: 0),
authenticated by the ``taxisSession`` cookie supplied by the caller.
"""

import time
from typing import Protocol

import requests

from statement_retrieval.taxis_portal.config import DEFAULT_REQUEST_DELAY, DEFAULT_TIMEOUT

SESSION_COOKIE = "taxisSession"


class Transport(Protocol):
    """Protocol defining the request interface the retriever needs."""

    def post(self, url: str, headers: dict[str, str]) -> bytes: ...


def session_headers(session_token: str, accept_json: bool = False) -> dict[str, str]:
    """Headers carrying the session identity for one request."""
    headers = {"Cookie": f"{SESSION_COOKIE}={session_token}"}
    if accept_json:
        headers["Accept"] = "application/json"
    return headers


class HttpTransport:
    """
    Blocking transport built on a requests session.

    Bodies are returned undecoded. Non-success responses raise
    ``requests.HTTPError``; timeouts and connection problems raise the
    matching ``requests`` exceptions.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay: float = DEFAULT_REQUEST_DELAY,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.request_delay = request_delay
        self.session = session or requests.Session()

    def post(self, url: str, headers: dict[str, str]) -> bytes:
        try:
            response = self.session.post(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            # Body bytes as sent; the portal omits the charset on HTML pages
            return response.content
        finally:
            # Keep the portal's request rate low
            if self.request_delay > 0:
                time.sleep(self.request_delay)

    def close(self) -> None:
        self.session.close()

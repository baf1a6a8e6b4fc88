"""
Paper fetching module - HTTP downloads of documents and source archives
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from . import __version__

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"paperfetch/{__version__}"


class FetchError(RuntimeError):
    """Raised when a download fails or returns a non-success status."""


class PaperFetcher:
    """Fetch raw bytes from document and archive endpoints

    Without an explicit ``session`` every ``fetch`` call opens and closes its
    own ``requests.Session``, so concurrent fetches from worker threads never
    share one. A session passed in is used as-is and closed by ``close()``.
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session
        if session is not None:
            session.headers["User-Agent"] = user_agent

    def fetch(self, url: str) -> bytes:
        """
        Download a URL and return the response body

        Args:
            url: Endpoint to fetch (redirects are followed)

        Returns:
            Response body as bytes

        Raises:
            FetchError: On transport failure or non-success status
        """
        if self.session is not None:
            return self._get(self.session, url)
        with self._open_session() as session:
            return self._get(session, url)

    def _open_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = self.user_agent
        return session

    def _get(self, session: requests.Session, url: str) -> bytes:
        logger.debug("GET %s", url)
        try:
            response = session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Request failed: {url} ({exc})") from exc

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content

    def close(self) -> None:
        if self.session is not None:
            self.session.close()

    def __enter__(self) -> "PaperFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""
ARC NFT Metadata Resolver - HTTP Fetch Client

This module provides the HTTP GET collaborator used to read metadata
documents, gateway content and indexer responses. Requests go through a
per-thread requests session and are run in a worker thread so callers can await
them; failed requests are reported once and never retried.
"""

import asyncio
import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

import requests
from requests.adapters import HTTPAdapter

DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"


class FetchError(Exception):
    """Raised when a GET request fails or returns a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


@dataclass
class HTTPConfig:
    """HTTP client configuration."""

    timeout: float = 30.0
    user_agent: str = "arcnft-resolver/1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    def get_headers(self) -> Dict[str, str]:
        """Get headers for requests."""
        headers = self.headers.copy()
        headers.setdefault("User-Agent", self.user_agent)
        headers.setdefault("Accept", "*/*")
        return headers


@dataclass
class HTTPResponse:
    """Body and content type of a successful GET."""

    url: str
    status_code: int
    content_type: str
    body: bytes

    @property
    def is_json(self) -> bool:
        return self.content_type == JSON_CONTENT_TYPE

    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON (raises ValueError on invalid JSON)."""
        return json.loads(self.body)


class HTTPClient:
    """
    Awaitable GET client backed by requests sessions.

    Each worker thread gets its own session, since requests sessions are not
    thread-safe. close() closes all of them.
    """

    def __init__(self, config: Optional[HTTPConfig] = None):
        self.config = config or HTTPConfig()
        self.logger = logging.getLogger(__name__)

        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Session owned by the calling thread."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    async def get(self, url: str) -> HTTPResponse:
        """
        Fetch a URL.

        Args:
            url: Absolute http(s) URL

        Returns:
            HTTPResponse with the normalized content type

        Raises:
            FetchError: On transport failure or non-2xx status
        """
        return await asyncio.to_thread(self._get, url)

    async def get_json(self, url: str) -> Any:
        """Fetch a URL and parse the body as JSON regardless of content type."""
        response = await self.get(url)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(url, f"invalid JSON body: {e}", response.status_code) from e

    def _get(self, url: str) -> HTTPResponse:
        self.logger.debug(f"GET {url}")

        try:
            response = self.session.get(
                url,
                headers=self.config.get_headers(),
                timeout=self.config.timeout
            )
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if not response.ok:
            raise FetchError(url, f"HTTP {response.status_code} {response.reason}", response.status_code)

        content_type = response.headers.get("content-type", DEFAULT_CONTENT_TYPE).split(";")[0].strip().lower()

        return HTTPResponse(
            url=url,
            status_code=response.status_code,
            content_type=content_type,
            body=response.content
        )

    def close(self):
        """Close every session opened by this client."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

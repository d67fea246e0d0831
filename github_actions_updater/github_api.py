"""
GitHub page fetching module
"""

import logging
import threading
from typing import Callable, List

import requests

from . import __version__
from .exceptions import FetchTimeout, TransportError
from .models import FetchResponse

DEFAULT_TIMEOUT = 10
USER_AGENT = f"github-actions-updater/{__version__} (python-requests)"


class GitHubClient:
    """Fetches public GitHub pages for version resolution.

    Instances are callable, so a client can be passed wherever a
    ``fetch(url) -> FetchResponse`` callable is expected. Lookups run on a
    thread pool, so each thread gets its own ``requests.Session``.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.timeout = timeout
        self.session_factory = session_factory
        self.logger = logging.getLogger(__name__)

        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.headers.update({
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml",
            })
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def fetch(self, url: str) -> FetchResponse:
        """GET a page. HTTP error statuses are returned, not raised."""
        self.logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"Request timed out: {url}")
            raise FetchTimeout(url, cause=e) from e
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed: {url}: {e}")
            raise TransportError(url, cause=e) from e

        self.logger.debug(f"{url} -> HTTP {response.status_code}")
        return FetchResponse(url=response.url or url, status=response.status_code, body=response.text)

    __call__ = fetch

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for session in sessions:
            session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

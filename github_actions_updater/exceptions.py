"""
Exception hierarchy for the workflow updater
"""

from typing import Optional


class UpdaterError(Exception):
    """Base class for all updater errors."""


class MalformedReferenceError(UpdaterError, ValueError):
    """A matched token could not be split into owner, name and version."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Malformed action reference '{token}': {reason}")


class TransportError(UpdaterError):
    """A page could not be fetched, or came back with an unusable status."""

    def __init__(self, url: str, status: Optional[int] = None, cause: Optional[BaseException] = None):
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            detail = f"HTTP {status}"
        else:
            detail = str(cause) if cause else "request failed"
        super().__init__(f"Failed to fetch {url}: {detail}")


class FetchTimeout(TransportError):
    """A single fetch timed out. Only the reference being resolved is skipped."""


class RewriteError(UpdaterError):
    """The rewrite was aborted; the workflow must be left untouched."""

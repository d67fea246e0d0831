"""
Workflow rewrite engine: extract, resolve, compare and substitute.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .exceptions import MalformedReferenceError, RewriteError, TransportError
from .models import DependencyReference, ResolvedVersion, RewriteEntry, RewriteResult
from .resolver import Fetch, VersionResolver
from .versioning import compare
from .workflow_parser import extract_references, parse_reference

DEFAULT_MAX_WORKERS = 4

# Per-pin replacement cap
MAX_SUBSTITUTIONS = 256


def substitute(text: str, name: str, current: str, latest: str, count: int = MAX_SUBSTITUTIONS):
    """Replace ``name@current`` with ``name@latest``, at most ``count`` times.

    ``name`` is the action path without its owner (``checkout``, or
    ``login-action/something`` for an action in a subdirectory), so the same
    pin published by two owners is rewritten in both places.

    Returns the new text and the number of replacements made. The match is
    bounded on both sides so that ``checkout@v1`` is not found inside
    ``my-checkout@v1`` or ``checkout@v1.2``.
    """
    pattern = re.compile(
        r"(?<![A-Za-z0-9-])" + re.escape(f"{name}@{current}") + r"(?![A-Za-z0-9-]|\.[0-9])"
    )
    replacement = f"{name}@{latest}"
    return pattern.subn(lambda _: replacement, text, count=count)


class WorkflowUpdater:
    """Rewrites stale action pins in workflow text."""

    def __init__(self, fetch: Fetch, max_workers: int = DEFAULT_MAX_WORKERS,
                 resolver: Optional[VersionResolver] = None):
        self.fetch = fetch
        self.max_workers = max(1, max_workers)
        self.resolver = resolver or VersionResolver(fetch)
        self.logger = logging.getLogger(__name__)

    def rewrite(self, text: str) -> RewriteResult:
        """Compute the updated document fully in memory.

        Raises RewriteError when a token cannot be parsed or a page cannot be
        fetched; nothing is returned in that case, so the caller has nothing
        partial to write.
        """
        try:
            references = [parse_reference(token) for token in extract_references(text)]
        except MalformedReferenceError as e:
            raise RewriteError(f"Extractor produced an unparsable reference: {e}") from e

        if not references:
            self.logger.info("No pinned actions found")
            return RewriteResult(original_text=text, updated_text=text)

        try:
            resolved = self.resolve_all(references)
        except TransportError as e:
            raise RewriteError(f"Aborting, {e}") from e

        updated = text
        report = []

        for result in resolved:
            if result.skipped:
                continue

            reference = result.reference
            delta = compare(reference, result.latest)
            if not delta.is_stale:
                self.logger.debug(f"{reference}: up to date ({result.latest})")
                continue

            updated, replaced = substitute(updated, reference.path, reference.version, result.latest)
            if not replaced:
                self.logger.debug(f"{reference}: no occurrence left to replace")
                continue

            entry = RewriteEntry(
                owner=reference.owner,
                name=reference.name,
                from_version=reference.version,
                to_version=result.latest,
            )
            self.logger.info(f"UPDATE: {entry} ({replaced} occurrence(s))")
            report.append(entry)

        return RewriteResult(original_text=text, updated_text=updated, report=report)

    def resolve_all(self, references: List[DependencyReference]) -> List[ResolvedVersion]:
        """Resolve references concurrently; results keep the order of ``references``.

        The first TransportError cancels every lookup that has not started yet
        before it is re-raised.
        """
        results: List[Optional[ResolvedVersion]] = [None] * len(references)
        workers = min(self.max_workers, len(references))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_idx = {
                executor.submit(self.resolver.resolve, reference): idx
                for idx, reference in enumerate(references)
            }
            try:
                for future, idx in future_to_idx.items():
                    results[idx] = future.result()
            except TransportError:
                cancelled = sum(future.cancel() for future in future_to_idx)
                self.logger.debug(f"Cancelled {cancelled} pending lookup(s)")
                raise

        return results


def rewrite(text: str, fetch: Fetch, max_workers: int = DEFAULT_MAX_WORKERS) -> RewriteResult:
    """Update every stale action pin in ``text`` using ``fetch`` to look up versions."""
    return WorkflowUpdater(fetch, max_workers=max_workers).rewrite(text)

"""
Depth-aware version comparison.

A pin's granularity decides how sensitive it is to upstream releases:
``@v1`` only goes stale when the major number changes, while ``@v1.4``
goes stale as soon as ``v1.5`` is out.

The comparison is string equality after truncation, not a numeric ordering.
Any difference at the pinned depth counts as stale, so a "latest" that is
older than the current pin is reported and written as well.
"""

from .models import DependencyReference, VersionDelta


def depth(version: str) -> int:
    """Number of dots in the version: 0 for ``v1``, 1 for ``v1.2``, 2 for ``v1.2.3``."""
    return version.count(".")


def truncate(version: str, depth: int) -> str:
    """Strip a leading ``v`` and keep the first ``depth + 1`` segments. Never pads."""
    if version.startswith("v"):
        version = version[1:]
    segments = version.split(".")
    return ".".join(segments[:depth + 1])


def _truncate_to_pin(current: str, latest: str):
    pin_depth = depth(current)
    return truncate(current, pin_depth), truncate(latest, pin_depth)


def is_stale(current: str, latest: str) -> bool:
    truncated_current, truncated_latest = _truncate_to_pin(current, latest)
    return truncated_current != truncated_latest


def compare(reference: DependencyReference, latest: str) -> VersionDelta:
    """Compare a reference's pinned version against the latest one at the pin's own depth."""
    truncated_current, truncated_latest = _truncate_to_pin(reference.version, latest)

    return VersionDelta(
        reference=reference,
        truncated_current=truncated_current,
        truncated_latest=truncated_latest,
        is_stale=is_stale(reference.version, latest),
    )

"""
Latest-version resolution for action references.

Versions are scraped from two public GitHub pages, in order:

1. the Marketplace listing, where the current release is shown in a badge
   ``<span class="... mx-2 ...">v4.1.0</span>``;
2. the repository releases page, where the newest release is the first
   ``<a href="/{owner}/{name}/releases/tag/{tag}">`` link.

Both patterns depend on GitHub's current markup and will break when it
changes. They are kept here, behind ``VersionResolver``, so that another
strategy (the REST API, say) can replace them without touching the rewrite
engine.
"""

import logging
import re
from typing import Callable, Optional

from .exceptions import FetchTimeout, TransportError
from .models import DependencyReference, FetchResponse, ResolvedVersion

Fetch = Callable[[str], FetchResponse]

MARKETPLACE_URL = "https://github.com/marketplace/actions/{slug}"
RELEASES_URL = "https://github.com/{owner}/{name}/releases"

MARKETPLACE_VERSION_PATTERN = re.compile(
    r'<span class="[^"]*\bmx-2\b[^"]*"[^>]*>\s*(v?[0-9]+(?:\.[0-9]+)*)\s*</span>'
)
MARKETPLACE_LINK_PATTERN = re.compile(
    r'<a[^>]+href="(?:https://github\.com)?/marketplace/actions/([A-Za-z0-9_.-]+)"[^>]*>'
    r'(?:(?!</a>).)*?View on Marketplace',
    re.DOTALL,
)
RELEASE_TAG_PATTERN = r'<a[^>]+href="/{owner}/{name}/releases/tag/(v?[0-9]+(?:\.[0-9]+)*)"'

SOURCE_MARKETPLACE = "marketplace"
SOURCE_RELEASES = "releases"


def marketplace_url(slug: str) -> str:
    return MARKETPLACE_URL.format(slug=slug)


def releases_url(reference: DependencyReference) -> str:
    return RELEASES_URL.format(owner=reference.owner, name=reference.name)


def parse_marketplace_version(html: str) -> Optional[str]:
    """Return the first version badge on a Marketplace page."""
    match = MARKETPLACE_VERSION_PATTERN.search(html)
    return match.group(1) if match else None


def parse_marketplace_slug(html: str) -> Optional[str]:
    """Return the Marketplace slug behind a repository page's "View on Marketplace" link."""
    match = MARKETPLACE_LINK_PATTERN.search(html)
    return match.group(1) if match else None


def parse_release_tag(html: str, reference: DependencyReference) -> Optional[str]:
    """Return the first release tag linked from a releases page."""
    pattern = RELEASE_TAG_PATTERN.format(
        owner=re.escape(reference.owner),
        name=re.escape(reference.name),
    )
    match = re.search(pattern, html, re.IGNORECASE)
    return match.group(1) if match else None


class VersionResolver:
    """Resolves the latest published version of an action with a fetch callable."""

    def __init__(self, fetch: Fetch):
        self.fetch = fetch
        self.logger = logging.getLogger(__name__)

    def resolve(self, reference: DependencyReference) -> ResolvedVersion:
        """Find the latest version of a reference.

        Returns a ResolvedVersion whose ``latest`` is None when the reference is
        skipped: the releases page is missing (404) or shows no release, or a
        request timed out. Any other transport failure raises TransportError.
        """
        try:
            latest = self._from_marketplace(reference)
            if latest:
                self.logger.debug(f"{reference.slug}: {latest} (marketplace)")
                return ResolvedVersion(reference, latest, SOURCE_MARKETPLACE)

            latest = self._from_releases(reference)
            if latest:
                self.logger.debug(f"{reference.slug}: {latest} (releases)")
                return ResolvedVersion(reference, latest, SOURCE_RELEASES)

        except FetchTimeout as e:
            self.logger.warning(f"Skipping {reference}: {e}")
            return ResolvedVersion(reference)

        self.logger.warning(f"Cannot determine latest version for {reference.slug}, skipping")
        return ResolvedVersion(reference)

    def _from_marketplace(self, reference: DependencyReference) -> Optional[str]:
        response = self.fetch(marketplace_url(reference.name))
        if response.ok:
            version = parse_marketplace_version(response.body)
            if version:
                return version

        # The listing can live under a slug other than the repository name;
        # the repository page links to it.
        repository = self.fetch(reference.repository_url)
        if not repository.ok:
            return None

        slug = parse_marketplace_slug(repository.body)
        if not slug or slug == reference.name:
            return None

        self.logger.debug(f"{reference.slug}: marketplace listing is '{slug}'")
        response = self.fetch(marketplace_url(slug))
        if not response.ok:
            return None
        return parse_marketplace_version(response.body)

    def _from_releases(self, reference: DependencyReference) -> Optional[str]:
        url = releases_url(reference)
        response = self.fetch(url)

        if response.status == 404:
            self.logger.info(f"{reference.slug}: no releases page ({url})")
            return None
        if not response.ok:
            raise TransportError(url, status=response.status)

        return parse_release_tag(response.body, reference)


def resolve_latest_version(reference: DependencyReference, fetch: Fetch) -> Optional[str]:
    """Latest published version of ``reference``, or None when it is skipped."""
    return VersionResolver(fetch).resolve(reference).latest

"""
Data models for the GitHub Actions updater
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class DependencyReference:
    """An action pinned in a workflow, e.g. ``docker/login-action@v2``."""

    owner: str
    name: str
    version: str
    subpath: Optional[str] = None
    token: str = ""

    @property
    def slug(self) -> str:
        """Repository slug. Release pages live at repository level, so the sub-path is dropped."""
        return f"{self.owner}/{self.name}"

    @property
    def repository_url(self) -> str:
        return f"https://github.com/{self.slug}"

    @property
    def path(self) -> str:
        """Everything between the owner and the ``@``: ``name`` or ``name/subpath``."""
        return f"{self.name}/{self.subpath}" if self.subpath else self.name

    def __str__(self) -> str:
        return self.token or f"{self.owner}/{self.path}@{self.version}"


@dataclass(frozen=True)
class ResolvedVersion:
    """Latest version found for a reference. ``latest`` is None when resolution was skipped."""

    reference: DependencyReference
    latest: Optional[str] = None
    source: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.latest is None


@dataclass(frozen=True)
class VersionDelta:
    """Current and latest versions, both truncated to the depth of the pin."""

    reference: DependencyReference
    truncated_current: str
    truncated_latest: str
    is_stale: bool


@dataclass(frozen=True)
class FetchResponse:
    """What a fetch callable hands back: final URL, HTTP status and decoded body."""

    url: str
    status: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class RewriteEntry:
    """One applied substitution."""

    owner: str
    name: str
    from_version: str
    to_version: str

    def to_dict(self) -> dict:
        """Convert the entry to dictionary format."""
        return {
            "owner": self.owner,
            "name": self.name,
            "from": self.from_version,
            "to": self.to_version,
        }

    def __str__(self) -> str:
        return f"{self.owner}/{self.name} is outdated: {self.from_version} -> {self.to_version}"


@dataclass
class RewriteResult:
    """Outcome of a rewrite: the updated document and the ordered report."""

    original_text: str
    updated_text: str
    report: List[RewriteEntry] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.updated_text != self.original_text

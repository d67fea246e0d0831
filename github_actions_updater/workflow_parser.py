"""
GitHub Actions workflow parser module
"""

import logging
import re
from pathlib import Path
from typing import List, Union

from .exceptions import MalformedReferenceError
from .models import DependencyReference

logger = logging.getLogger(__name__)

# owner/name[/subpath]@[v]major[.minor[.patch]]
DEPENDENCY_PATTERN = re.compile(
    r"[A-Za-z0-9-]+/[A-Za-z0-9-]+(?:/[A-Za-z0-9-]+)?@v?[0-9]+(?:\.[0-9]+){0,2}"
)

VERSION_PATTERN = re.compile(r"^v?[0-9]+(?:\.[0-9]+){0,2}$")


def extract_references(text: str) -> List[str]:
    """Find every unique action reference token in raw workflow text, in first-seen order.

    The text is scanned with a regular expression rather than parsed as YAML,
    so quoting, indentation and broken documents make no difference.
    """
    seen = set()
    tokens = []

    for match in DEPENDENCY_PATTERN.finditer(text):
        token = match.group(0)
        if token in seen:
            continue
        seen.add(token)
        tokens.append(token)

    logger.debug(f"Extracted {len(tokens)} unique action reference(s)")
    return tokens


def parse_reference(token: str) -> DependencyReference:
    """Split ``owner/name[/subpath]@version`` into a DependencyReference."""
    path, sep, version = token.rpartition("@")
    if not sep:
        raise MalformedReferenceError(token, "missing '@' between name and version")

    owner, slash, remainder = path.partition("/")
    if not slash:
        raise MalformedReferenceError(token, "missing '/' between owner and name")

    name, _, subpath = remainder.partition("/")

    if not owner or not name:
        raise MalformedReferenceError(token, "owner and name must not be empty")
    if not VERSION_PATTERN.match(version):
        raise MalformedReferenceError(token, f"unsupported version '{version}'")

    return DependencyReference(
        owner=owner,
        name=name,
        version=version,
        subpath=subpath or None,
        token=token,
    )


class WorkflowParser:
    """Reads and writes workflow files."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_workflow(self, workflow_path: Union[str, Path]) -> str:
        """Read a workflow file as text."""
        with open(workflow_path, 'r', encoding='utf-8') as f:
            return f.read()

    def save_workflow(self, workflow_path: Union[str, Path], text: str) -> None:
        """Write the updated workflow text back to file."""
        with open(workflow_path, 'w', encoding='utf-8') as f:
            f.write(text)

        self.logger.info(f"Updated workflow file: {workflow_path}")

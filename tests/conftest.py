"""Shared fixtures for all tests."""

import os
import threading

import pytest

from github_actions_updater.exceptions import TransportError
from github_actions_updater.models import FetchResponse


FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def marketplace_page(version):
    return (
        '<div class="d-flex">'
        f'<span class="d-inline-block mx-2 text-bold">{version}</span>'
        '<span class="color-fg-muted">Latest version</span>'
        '</div>'
    )


def releases_page(owner, name, *tags):
    links = "".join(
        f'<a href="/{owner}/{name}/releases/tag/{tag}" data-view-component="true">{tag}</a>'
        for tag in tags
    )
    return f'<div class="Box">{links}</div>'


class StubFetch:
    """Dict-backed fetch callable. Unknown URLs return 404.

    Values are either (status, body) tuples or exceptions to raise.
    """

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, url):
        with self._lock:
            self.calls.append(url)
        page = self.pages.get(url, (404, "Not Found"))
        if isinstance(page, Exception):
            raise page
        status, body = page
        return FetchResponse(url=url, status=status, body=body)


@pytest.fixture
def stub_fetch():
    return StubFetch()


@pytest.fixture
def sample_workflow_path():
    """Path to the sample workflow fixture."""
    return os.path.join(FIXTURES_DIR, "sample_workflow.yml")


@pytest.fixture
def sample_workflow(sample_workflow_path):
    with open(sample_workflow_path, "r", encoding="utf-8") as f:
        return f.read()


@pytest.fixture
def transport_error():
    return TransportError("https://github.com/broken", cause=ConnectionError("connection reset"))

"""Tests for the CLI."""

import logging

import pytest

from conftest import StubFetch, marketplace_page
from github_actions_updater import cli
from github_actions_updater.utils import setup_logging, validate_workflow_file


WORKFLOW = """name: CI
on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v1
"""


@pytest.fixture
def workflow_file(tmp_path):
    path = tmp_path / "ci.yml"
    path.write_text(WORKFLOW, encoding="utf-8")
    return path


@pytest.fixture
def fake_client(monkeypatch):
    """Replace GitHubClient with a stub fetch; the test fills in its pages."""
    fetch = StubFetch()

    class FakeClient:
        def __init__(self, timeout=None):
            self.timeout = timeout

        def __call__(self, url):
            return fetch(url)

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return None

    monkeypatch.setattr(cli, "GitHubClient", FakeClient)
    return fetch


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

class TestModes:
    def test_console_mode_prints_and_leaves_file(self, workflow_file, fake_client, capsys):
        fake_client.pages["https://github.com/marketplace/actions/checkout"] = (200, marketplace_page("v4"))

        assert cli.main(["c", str(workflow_file)]) == 0

        captured = capsys.readouterr()
        assert "uses: actions/checkout@v4" in captured.out
        assert "actions/checkout is outdated: v1 -> v4" in captured.err
        assert workflow_file.read_text(encoding="utf-8") == WORKFLOW

    def test_write_mode_updates_file(self, workflow_file, fake_client, capsys):
        fake_client.pages["https://github.com/marketplace/actions/checkout"] = (200, marketplace_page("v4"))

        assert cli.main(["w", str(workflow_file)]) == 0

        assert "uses: actions/checkout@v4" in workflow_file.read_text(encoding="utf-8")
        assert capsys.readouterr().out == ""

    def test_up_to_date(self, workflow_file, fake_client, capsys):
        fake_client.pages["https://github.com/marketplace/actions/checkout"] = (200, marketplace_page("v1.9.9"))

        assert cli.main(["w", str(workflow_file)]) == 0

        assert workflow_file.read_text(encoding="utf-8") == WORKFLOW
        assert "All actions are up to date" in capsys.readouterr().err

    def test_unsupported_mode_is_noop(self, workflow_file, fake_client, caplog):
        with caplog.at_level(logging.WARNING):
            assert cli.main(["x", str(workflow_file)]) == 0

        assert "Unsupported mode 'x'" in caplog.text
        assert fake_client.calls == []
        assert workflow_file.read_text(encoding="utf-8") == WORKFLOW


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

class TestErrorHandling:
    def test_missing_file(self, tmp_path, fake_client):
        assert cli.main(["c", str(tmp_path / "missing.yml")]) == 1

    def test_transport_error_leaves_file_untouched(self, workflow_file, fake_client, transport_error, capsys):
        fake_client.pages["https://github.com/marketplace/actions/checkout"] = transport_error

        assert cli.main(["w", str(workflow_file)]) == 1

        assert workflow_file.read_text(encoding="utf-8") == WORKFLOW
        assert "left unchanged" in capsys.readouterr().err

    def test_malformed_yaml_still_processed(self, tmp_path, fake_client, capsys):
        path = tmp_path / "broken.yml"
        path.write_text("uses: actions/checkout@v1\n  : [unclosed\n", encoding="utf-8")
        fake_client.pages["https://github.com/marketplace/actions/checkout"] = (200, marketplace_page("v4"))

        assert cli.main(["c", str(path)]) == 0
        assert "actions/checkout@v4" in capsys.readouterr().out

    def test_positional_arguments_are_enough(self):
        args = cli.create_parser().parse_args(["w", "ci.yml"])
        assert args.mode == "w"
        assert str(args.workflow_file) == "ci.yml"
        assert args.verbose == 0
        assert args.workers == cli.DEFAULT_MAX_WORKERS
        assert args.timeout == cli.DEFAULT_TIMEOUT

    def test_tuning_flags_marked_optional(self):
        help_text = cli.create_parser().format_help()
        assert "optional tuning" in help_text
        assert help_text.count("Optional:") == 3

    def test_missing_arguments(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["c"])
        assert exc_info.value.code == 2


# ---------------------------------------------------------------------------
# utils
# ---------------------------------------------------------------------------

class TestUtils:
    def test_validate_workflow_file(self, workflow_file):
        assert validate_workflow_file(workflow_file)

    def test_validate_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert not validate_workflow_file(path)

    def test_validate_rejects_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        assert not validate_workflow_file(path)

    def test_validate_missing_file(self, tmp_path):
        assert not validate_workflow_file(tmp_path / "missing.yml")

    @pytest.mark.parametrize("verbosity,level", [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
    ])
    def test_setup_logging_levels(self, verbosity, level):
        setup_logging(verbosity)
        assert logging.getLogger().level == level

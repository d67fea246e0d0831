import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import RewriteError
from .github_api import DEFAULT_TIMEOUT, GitHubClient
from .updater import DEFAULT_MAX_WORKERS, WorkflowUpdater
from .utils import setup_logging, validate_workflow_file
from .workflow_parser import WorkflowParser

MODE_WRITE = "w"
MODE_CONSOLE = "c"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="github-actions-updater",
        description="Update the actions pinned in a GitHub Actions workflow to their latest versions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  w    rewrite the workflow file in place
  c    print the updated workflow to stdout

Examples:
  %(prog)s c .github/workflows/ci.yml
  %(prog)s w .github/workflows/ci.yml
  %(prog)s -vv --workers 8 w .github/workflows/release.yml
        """
    )

    parser.add_argument(
        "mode",
        help="'w' to write the file in place, 'c' to print the result"
    )
    parser.add_argument(
        "workflow_file",
        type=Path,
        help="Path to the workflow file"
    )

    # Tuning options, none of them needed for a normal run
    tuning_group = parser.add_argument_group(
        "optional tuning",
        "Not required; the two positional arguments are enough"
    )
    tuning_group.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Optional: increase verbosity (use -v, -vv, or -vvv)"
    )
    tuning_group.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Optional: maximum concurrent lookups (default: {DEFAULT_MAX_WORKERS})"
    )
    tuning_group.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Optional: per-request timeout in seconds (default: {DEFAULT_TIMEOUT})"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.mode not in (MODE_WRITE, MODE_CONSOLE):
        logging.warning(f"Unsupported mode '{args.mode}', expected '{MODE_WRITE}' or '{MODE_CONSOLE}'. Nothing to do.")
        return 0

    workflow_file = args.workflow_file
    if not workflow_file.is_file():
        logging.error(f"Workflow file not found: {workflow_file}")
        return 1

    if not validate_workflow_file(workflow_file):
        logging.warning(f"{workflow_file} does not look like a workflow file, scanning it anyway")

    workflow_parser = WorkflowParser()
    try:
        text = workflow_parser.read_workflow(workflow_file)
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"Cannot read {workflow_file}: {e}")
        return 1

    logging.info(f"Processing workflow file: {workflow_file}")

    try:
        with GitHubClient(timeout=args.timeout) as client:
            result = WorkflowUpdater(client, max_workers=args.workers).rewrite(text)
    except RewriteError as e:
        logging.error(f"{e}")
        print(f"{workflow_file} left unchanged", file=sys.stderr)
        return 1

    for entry in result.report:
        print(entry, file=sys.stderr)

    if not result.changed:
        print("All actions are up to date", file=sys.stderr)

    if args.mode == MODE_CONSOLE:
        sys.stdout.write(result.updated_text)
        return 0

    if result.changed:
        try:
            workflow_parser.save_workflow(workflow_file, result.updated_text)
        except OSError as e:
            logging.error(f"Cannot write {workflow_file}: {e}")
            return 1
        print(f"Updated {workflow_file} ({len(result.report)} action(s))", file=sys.stderr)

    return 0

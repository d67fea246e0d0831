"""
Utility functions for the GitHub Actions updater
"""

import logging
import sys
from pathlib import Path
from typing import Union

import yaml


def setup_logging(verbosity: int) -> None:
    """Set up logging based on verbosity level."""
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if verbosity >= 2:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )
    # basicConfig leaves an already configured root logger alone
    logging.getLogger().setLevel(level)

    # Reduce noise from external libraries
    if verbosity < 3:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)


def validate_workflow_file(file_path: Union[str, Path]) -> bool:
    """Check that a file looks like a workflow: a YAML mapping with 'on' or 'jobs'."""
    file_path = Path(file_path)
    if not file_path.is_file():
        return False

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = yaml.safe_load(f)
    except (yaml.YAMLError, OSError, UnicodeDecodeError):
        return False

    if not isinstance(content, dict):
        return False

    # PyYAML reads a bare `on:` key as the boolean True
    return 'on' in content or True in content or 'jobs' in content

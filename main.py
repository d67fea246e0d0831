#!/usr/bin/env python3
"""
github-actions-updater - Main Entry Point
"""

import sys
from github_actions_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())

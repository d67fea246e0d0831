"""
github-actions-updater

A Python tool that finds the actions pinned in a GitHub Actions workflow,
looks up their latest published versions and rewrites stale pins in place.
"""

__version__ = "1.0.0"

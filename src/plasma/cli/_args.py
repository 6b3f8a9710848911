"""Common CLI argument registration utilities.

This module provides reusable argument registration functions to reduce
duplication across CLI commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for repository root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override repository root path",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output (INFO logging)",
    )


def add_package_arg(parser: argparse.ArgumentParser) -> None:
    """Add repeatable --package NAME=TARGET selection override."""
    parser.add_argument(
        "--package",
        "-p",
        dest="packages",
        action="append",
        default=[],
        metavar="NAME=TARGET",
        help="Select a package at a resolved target (repeatable; overrides config)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use (--json, --repo-root, --verbose)."""
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_package_arg",
    "add_standard_flags",
]

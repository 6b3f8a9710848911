"""
Plasma CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (compose/, ...).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
- _logging: Per-invocation logging setup
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_repo_root_flag,
    add_dry_run_flag,
    add_verbose_flag,
    add_package_arg,
    add_standard_flags,
)
from ._utils import get_repo_root, parse_package_selections, merge_selections

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_package_arg",
    "add_standard_flags",
    # Utilities
    "get_repo_root",
    "parse_package_selections",
    "merge_selections",
]

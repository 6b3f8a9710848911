"""
Plasma compose layers command.

SUMMARY: List recognized layer names
"""
from __future__ import annotations

import argparse
import sys

from plasma.cli import OutputFormatter, add_json_flag

SUMMARY = "List recognized layer names"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Print the layer catalog in canonical order."""
    from plasma.core.compose import LAYER_NAMES

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    if formatter.json_mode:
        formatter.json_output({"layers": list(LAYER_NAMES)})
    else:
        for name in LAYER_NAMES:
            formatter.text(name)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

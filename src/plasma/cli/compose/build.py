"""
Plasma compose build command.

SUMMARY: Merge selected packages into the image tree
"""
from __future__ import annotations

import argparse
import sys

from plasma.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_package_arg,
    add_standard_flags,
)

SUMMARY = "Merge selected packages into the image tree (.plasma/compose/image/src)"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_package_arg(parser)
    parser.add_argument(
        "--no-clean",
        dest="clean",
        action="store_false",
        default=None,
        help="Overlay onto the existing image tree instead of rebuilding it",
    )
    parser.add_argument(
        "--clean",
        dest="clean",
        action="store_true",
        help="Rebuild the image tree from scratch (default from compose.clean)",
    )
    parser.set_defaults(clean=None)
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Build the image tree."""
    from plasma.cli.compose._context import build_compose_context
    from plasma.core.compose import ComposeBuilder

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_compose_context(args)
        builder = ComposeBuilder.from_config(
            ctx.repo_root,
            config=ctx.config,
            clean=getattr(args, "clean", None),
        )
        result = builder.build(ctx.selections, dry_run=bool(getattr(args, "dry_run", False)))
    except Exception as e:
        formatter.error(e, error_code="compose_build_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"status": "dry-run" if result.dry_run else "success", **result.to_dict()})
        return 0

    prefix = "[dry-run] " if result.dry_run else ""
    for decision in result.decisions:
        formatter.text(f"{prefix}{decision.describe()}")
    if result.dry_run:
        formatter.text(f"[dry-run] Would compose {len(result.decisions)} package(s) into {result.output_dir}")
        return 0

    merge = result.merge
    layers = ", ".join(merge.layers) if merge and merge.layers else "none"
    files = merge.files_written if merge else 0
    formatter.text(f"Composed {len(result.decisions)} package(s) into {result.output_dir}")
    formatter.text_kv("Layers", layers)
    formatter.text_kv("Files", files)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

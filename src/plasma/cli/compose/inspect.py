"""
Plasma compose inspect command.

SUMMARY: Show per-package layout decisions without writing
"""
from __future__ import annotations

import argparse
import sys

from plasma.cli import OutputFormatter, add_package_arg, add_standard_flags

SUMMARY = "Show which layout (legacy/modern) each selected package uses"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_package_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Inspect selected packages."""
    from plasma.cli.compose._context import build_compose_context
    from plasma.core.compose import ComposeBuilder

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_compose_context(args)
        builder = ComposeBuilder.from_config(ctx.repo_root, config=ctx.config)
        decisions = builder.inspect(ctx.selections)
    except Exception as e:
        formatter.error(e, error_code="compose_inspect_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"packages": [d.to_dict() for d in decisions]})
        return 0

    if not decisions:
        formatter.text("No packages selected.")
        return 0

    for decision in decisions:
        formatter.text(f"{decision.name} ({decision.target})")
        formatter.text_kv("Layout", decision.layout.value)
        formatter.text_kv("Content root", decision.content_root.path)
        formatter.text_kv("Layers", ", ".join(decision.layers) or "none")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

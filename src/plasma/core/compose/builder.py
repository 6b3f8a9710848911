"""Build orchestration for the composed image tree.

``ComposeBuilder`` enumerates the selected packages, detects each package's
layout, and merges every content root into the output directory in
package-name order.

Rebuild policy:
- ``clean=True`` (default): the tree is built from scratch in a staging
  directory next to the output and swapped into place only after the merge
  succeeds. A failed build leaves the previous output as it was.
- ``clean=False``: layers are overlaid onto the existing output and nothing
  is ever deleted. A failed build may leave partial output behind.

Builds against the same output directory are serialized with an advisory
lock on ``<output_dir>.lock``.
"""
from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from plasma.core.utils.io import LockTimeoutError, acquire_file_lock

from .exceptions import BuildLockError, MergeError
from .layout import present_layers, resolve_content_root
from .merger import TreeMerger
from .models import BuildResult, MergeResult, PackageDecision
from .packages import PackageEnumerator

logger = logging.getLogger(__name__)


class ComposeBuilder:
    """Compose selected packages into the image tree."""

    def __init__(
        self,
        output_dir: Path,
        packages_dir: Path,
        *,
        clean: bool = True,
        lock_timeout: Optional[float] = None,
        lock_poll_interval: Optional[float] = None,
        merger: Optional[TreeMerger] = None,
    ) -> None:
        """Initialize builder.

        Args:
            output_dir: Canonical image tree directory (merge target)
            packages_dir: Root of the local package cache
            clean: Rebuild from scratch (True) or overlay onto existing output
            lock_timeout: Seconds to wait for a concurrent build to finish
            lock_poll_interval: Seconds between lock attempts
            merger: TreeMerger to use (defaults to a new instance)
        """
        self.output_dir = Path(output_dir)
        self.enumerator = PackageEnumerator(packages_dir)
        self.clean = clean
        self.lock_timeout = lock_timeout
        self.lock_poll_interval = lock_poll_interval
        self.merger = merger or TreeMerger()

    @classmethod
    def from_config(
        cls,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        clean: Optional[bool] = None,
    ) -> "ComposeBuilder":
        """Create a builder from project configuration (``paths``/``compose``)."""
        from plasma.core.config import ComposeConfig

        cfg = ComposeConfig(repo_root, config=config)
        return cls(
            cfg.output_dir,
            cfg.packages_dir,
            clean=cfg.clean if clean is None else clean,
            lock_timeout=cfg.lock_timeout,
            lock_poll_interval=cfg.lock_poll_interval,
        )

    @property
    def packages_dir(self) -> Path:
        return self.enumerator.packages_dir

    def inspect(self, selections: Mapping[str, str]) -> tuple[PackageDecision, ...]:
        """Enumerate packages and decide each one's content root (read-only)."""
        decisions = []
        for ref in self.enumerator.enumerate(selections):
            content_root = resolve_content_root(ref.root)
            layers = present_layers(content_root.path)
            decision = PackageDecision(
                name=ref.name,
                target=ref.target,
                content_root=content_root,
                layers=layers,
            )
            logger.info(decision.describe())
            decisions.append(decision)
        return tuple(decisions)

    def build(self, selections: Mapping[str, str], *, dry_run: bool = False) -> BuildResult:
        """Build the image tree from ``selections`` (package name -> target).

        Any package or merge failure aborts the whole build.

        Raises:
            PackageResolutionError: A selected package is not in the cache.
            MergeError: Reading a package or writing the output failed.
            BuildLockError: Another build holds the output lock.
        """
        decisions = self.inspect(selections)
        if dry_run:
            return BuildResult(
                output_dir=self.output_dir,
                decisions=decisions,
                clean=self.clean,
                dry_run=True,
            )

        try:
            with acquire_file_lock(
                self.output_dir,
                timeout=self.lock_timeout,
                poll_interval=self.lock_poll_interval,
            ):
                merge = self._merge(decisions)
        except LockTimeoutError as exc:
            raise BuildLockError(
                f"Another build is using {self.output_dir}: {exc}",
                context={"output_dir": self.output_dir},
            ) from exc

        logger.info(
            "Composed %d package(s) into %s (%d files, layers: %s)",
            len(decisions),
            self.output_dir,
            merge.files_written,
            ", ".join(merge.layers) or "none",
        )
        return BuildResult(
            output_dir=self.output_dir,
            decisions=decisions,
            merge=merge,
            clean=self.clean,
        )

    def _merge(self, decisions: Sequence[PackageDecision]) -> MergeResult:
        sources = [d.content_root for d in decisions]
        try:
            if not self.clean:
                return self.merger.merge(sources, self.output_dir)
            return self._merge_staged(sources)
        except MergeError as exc:
            raise self._with_package(exc, decisions) from exc

    def _merge_staged(self, sources) -> MergeResult:
        parent = self.output_dir.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = parent / f".{self.output_dir.name}.staging-{uuid.uuid4().hex[:8]}"
            staging.mkdir()
        except OSError as exc:
            raise MergeError(
                f"Cannot create staging directory in {parent}: {exc}",
                context={"destination": parent},
            ) from exc

        try:
            result = self.merger.merge(sources, staging)
            self._swap_into_place(staging)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        return MergeResult(
            destination=self.output_dir,
            layers=result.layers,
            files_written=result.files_written,
            files_overwritten=result.files_overwritten,
        )

    def _swap_into_place(self, staging: Path) -> None:
        output = self.output_dir
        previous: Optional[Path] = None
        try:
            if output.is_symlink() or (output.exists() and not output.is_dir()):
                raise MergeError(
                    f"Path collision: {output} exists and is not a directory",
                    context={"destination": output},
                )
            if output.exists():
                previous = output.with_name(f".{output.name}.old-{uuid.uuid4().hex[:8]}")
                os.replace(output, previous)
            os.replace(staging, output)
        except MergeError:
            raise
        except OSError as exc:
            if previous is not None and previous.exists() and not output.exists():
                os.replace(previous, output)
            raise MergeError(
                f"Cannot move staged tree into {output}: {exc}",
                context={"destination": output},
            ) from exc

        if previous is not None:
            shutil.rmtree(previous, ignore_errors=True)

    def _with_package(self, exc: MergeError, decisions: Sequence[PackageDecision]) -> MergeError:
        source = exc.context.get("source")
        for decision in decisions:
            if source is not None and Path(source) == decision.content_root.path:
                return MergeError(
                    f"{decision.name}: {exc}",
                    context={**exc.context, "package": decision.name, "target": decision.target},
                )
        return exc


__all__ = ["ComposeBuilder"]

"""Tree merger.

Overlays the layer directories of each content root onto one destination
tree, in the order given. A file provided by a later source replaces the
same relative path from an earlier one (whole-file, last source wins).
Entries under a content root that are not catalog layers are ignored.

Sources are only read. Symbolic links inside a layer are reproduced as
links rather than followed.
"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, Sequence, Union

from plasma.core.utils.io import ensure_directory

from .exceptions import MergeError
from .layers import is_layer, sort_layers
from .models import ContentRoot, MergeResult

logger = logging.getLogger(__name__)

Source = Union[ContentRoot, Path]


def _raise(err: OSError) -> None:
    raise err


class TreeMerger:
    """Overlay layer trees from ordered content roots onto a destination."""

    def merge(self, sources: Sequence[Source], destination: Path) -> MergeResult:
        """Merge ``sources`` (in order) into ``destination``.

        Args:
            sources: Content roots in merge order. Order is preserved as given;
                nothing is sorted or deduplicated here.
            destination: Directory receiving ``<layer>/...`` subtrees. Created
                when missing; existing content is overlaid, not cleared.

        Returns:
            MergeResult with the layers and file counts written.

        Raises:
            MergeError: On the first read/write failure or type collision.
                Output written before the failure stays on disk.
        """
        destination = Path(destination)
        try:
            ensure_directory(destination)
        except OSError as exc:
            raise MergeError(
                f"Cannot create merge destination {destination}: {exc}",
                context={"destination": destination},
            ) from exc

        layers: set[str] = set()
        written = 0
        overwritten = 0

        for source in sources:
            root = source.path if isinstance(source, ContentRoot) else Path(source)
            for layer_dir in self._iter_layer_dirs(root):
                layers.add(layer_dir.name)
                w, o = self._overlay(layer_dir, destination / layer_dir.name, source_root=root)
                logger.debug("Merged layer %s from %s (%d files)", layer_dir.name, root, w)
                written += w
                overwritten += o

        return MergeResult(
            destination=destination,
            layers=tuple(sort_layers(layers)),
            files_written=written,
            files_overwritten=overwritten,
        )

    def _iter_layer_dirs(self, root: Path) -> Iterator[Path]:
        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise MergeError(
                f"Cannot read content root {root}: {exc}",
                context={"source": root, "path": root},
            ) from exc

        for entry in entries:
            if not is_layer(entry.name):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError as exc:
                raise MergeError(
                    f"Cannot read layer {entry}: {exc}",
                    context={"source": root, "path": entry},
                ) from exc
            if is_dir:
                yield entry

    def _overlay(self, src: Path, dst: Path, *, source_root: Path) -> tuple[int, int]:
        written = 0
        overwritten = 0
        current = src
        try:
            self._make_dir(dst)
            for dirpath, dirnames, filenames in os.walk(src, onerror=_raise):
                here = Path(dirpath)
                target_dir = dst / here.relative_to(src)
                self._make_dir(target_dir)

                # Linked directories are copied as links, not descended into.
                dirnames.sort()
                for name in list(dirnames):
                    if (here / name).is_symlink():
                        dirnames.remove(name)
                        filenames.append(name)

                for name in sorted(filenames):
                    current = here / name
                    if self._copy_entry(current, target_dir / name):
                        overwritten += 1
                    written += 1
        except MergeError as exc:
            exc.context.setdefault("source", source_root)
            raise
        except OSError as exc:
            failed = Path(exc.filename) if getattr(exc, "filename", None) else current
            raise MergeError(
                f"Failed to merge {failed} into {dst}: {exc}",
                context={"source": source_root, "path": failed, "destination": dst},
            ) from exc
        return written, overwritten

    def _make_dir(self, path: Path) -> None:
        if path.is_symlink() or (path.exists() and not path.is_dir()):
            raise MergeError(
                f"Path collision: {path} exists and is not a directory",
                context={"path": path},
            )
        path.mkdir(parents=True, exist_ok=True)

    def _copy_entry(self, src: Path, dst: Path) -> bool:
        """Copy one file or link; return True when it replaced an existing entry."""
        replaced = False
        if dst.is_symlink() or dst.exists():
            if dst.is_dir() and not dst.is_symlink():
                raise MergeError(
                    f"Path collision: {dst} is a directory, cannot overwrite with {src}",
                    context={"path": dst},
                )
            # Unlink first so a copy never writes through an existing link.
            dst.unlink()
            replaced = True

        if src.is_symlink():
            os.symlink(os.readlink(src), dst)
        else:
            shutil.copy2(src, dst)
        return replaced


__all__ = ["TreeMerger"]

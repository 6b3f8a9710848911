"""Tests for the ordered, last-source-wins tree merger."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers.packages import snapshot_tree, write_files
from plasma.core.compose.exceptions import MergeError
from plasma.core.compose.layout import resolve_content_root
from plasma.core.compose.merger import TreeMerger


def _source(root: Path, files: dict[str, str]):
    write_files(root, files)
    return resolve_content_root(root)


class TestTreeMergerOverlay:
    def test_later_source_wins_on_conflict(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/config.txt": "from A"})
        b = _source(tmp_path / "b", {"platform/config.txt": "from B"})
        dest = tmp_path / "out"

        result = TreeMerger().merge([a, b], dest)

        assert (dest / "platform" / "config.txt").read_text(encoding="utf-8") == "from B"
        assert result.files_written == 2
        assert result.files_overwritten == 1

    def test_reversed_order_flips_the_winner(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/config.txt": "from A"})
        b = _source(tmp_path / "b", {"platform/config.txt": "from B"})
        dest = tmp_path / "out"

        TreeMerger().merge([b, a], dest)

        assert (dest / "platform" / "config.txt").read_text(encoding="utf-8") == "from A"

    def test_non_conflicting_files_are_unioned(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/a.txt": "a", "platform/nested/deep/x.txt": "x"})
        b = _source(tmp_path / "b", {"platform/b.txt": "b", "foundation/f.txt": "f"})
        dest = tmp_path / "out"

        result = TreeMerger().merge([a, b], dest)

        assert snapshot_tree(dest) == {
            "foundation/f.txt": b"f",
            "platform/a.txt": b"a",
            "platform/b.txt": b"b",
            "platform/nested/deep/x.txt": b"x",
        }
        assert result.layers == ("platform", "foundation")

    def test_unrecognized_top_level_entries_are_ignored(self, tmp_path: Path) -> None:
        a = _source(
            tmp_path / "a",
            {
                "platform/a.txt": "a",
                "docs/index.md": "docs",
                "README.md": "readme",
                "environment.yaml": "env",
            },
        )
        dest = tmp_path / "out"

        TreeMerger().merge([a], dest)

        assert sorted(p.name for p in dest.iterdir()) == ["platform"]

    def test_modern_source_is_read_from_src(self, tmp_path: Path) -> None:
        modern = _source(tmp_path / "m", {"src/interaction/c.txt": "c", "docs/x.md": "x"})
        dest = tmp_path / "out"

        TreeMerger().merge([modern], dest)

        assert snapshot_tree(dest) == {"interaction/c.txt": b"c"}

    def test_plain_paths_are_accepted_as_sources(self, tmp_path: Path) -> None:
        write_files(tmp_path / "a", {"cognition/k.txt": "k"})
        dest = tmp_path / "out"

        TreeMerger().merge([tmp_path / "a"], dest)

        assert (dest / "cognition" / "k.txt").exists()

    def test_sources_are_never_modified(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/config.txt": "A"})
        b = _source(tmp_path / "b", {"platform/config.txt": "B"})
        before = (snapshot_tree(tmp_path / "a"), snapshot_tree(tmp_path / "b"))

        TreeMerger().merge([a, b], tmp_path / "out")

        assert (snapshot_tree(tmp_path / "a"), snapshot_tree(tmp_path / "b")) == before

    def test_empty_sources_create_empty_destination(self, tmp_path: Path) -> None:
        dest = tmp_path / "out" / "image" / "src"

        result = TreeMerger().merge([], dest)

        assert dest.is_dir()
        assert list(dest.iterdir()) == []
        assert result.layers == ()
        assert result.files_written == 0

    def test_existing_destination_is_overlaid_not_cleared(self, tmp_path: Path) -> None:
        dest = tmp_path / "out"
        write_files(dest, {"platform/stale.txt": "old", "integration/keep.txt": "keep"})
        a = _source(tmp_path / "a", {"platform/new.txt": "new"})

        TreeMerger().merge([a], dest)

        assert snapshot_tree(dest) == {
            "integration/keep.txt": b"keep",
            "platform/new.txt": b"new",
            "platform/stale.txt": b"old",
        }

    def test_file_metadata_is_preserved(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/run.sh": "#!/bin/sh\n"})
        src_file = tmp_path / "a" / "platform" / "run.sh"
        os.chmod(src_file, 0o755)
        dest = tmp_path / "out"

        TreeMerger().merge([a], dest)

        copied = dest / "platform" / "run.sh"
        assert os.stat(copied).st_mode & 0o777 == 0o755
        assert int(copied.stat().st_mtime) == int(src_file.stat().st_mtime)


class TestTreeMergerLinks:
    def test_symlinks_are_copied_as_links(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/real.txt": "real"})
        (tmp_path / "a" / "platform" / "alias.txt").symlink_to("real.txt")
        dest = tmp_path / "out"

        TreeMerger().merge([a], dest)

        alias = dest / "platform" / "alias.txt"
        assert alias.is_symlink()
        assert os.readlink(alias) == "real.txt"

    def test_linked_directories_are_not_descended(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/shared/x.txt": "x"})
        (tmp_path / "a" / "platform" / "linked").symlink_to("shared", target_is_directory=True)
        dest = tmp_path / "out"

        TreeMerger().merge([a], dest)

        assert (dest / "platform" / "linked").is_symlink()
        assert (dest / "platform" / "shared" / "x.txt").read_text(encoding="utf-8") == "x"

    def test_overwrite_does_not_write_through_existing_link(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside.txt"
        outside.write_text("untouched", encoding="utf-8")
        (tmp_path / "a" / "platform").mkdir(parents=True)
        (tmp_path / "a" / "platform" / "conf.txt").symlink_to(outside)
        a = resolve_content_root(tmp_path / "a")
        b = _source(tmp_path / "b", {"platform/conf.txt": "from B"})
        dest = tmp_path / "out"

        TreeMerger().merge([a, b], dest)

        assert outside.read_text(encoding="utf-8") == "untouched"
        assert not (dest / "platform" / "conf.txt").is_symlink()
        assert (dest / "platform" / "conf.txt").read_text(encoding="utf-8") == "from B"


class TestTreeMergerFailures:
    def test_file_over_directory_collision_raises(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/thing/inner.txt": "dir"})
        b = _source(tmp_path / "b", {"platform/thing": "file"})

        with pytest.raises(MergeError, match="collision") as exc_info:
            TreeMerger().merge([a, b], tmp_path / "out")

        assert Path(exc_info.value.context["source"]) == tmp_path / "b"

    def test_directory_over_file_collision_raises(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/thing": "file"})
        b = _source(tmp_path / "b", {"platform/thing/inner.txt": "dir"})

        with pytest.raises(MergeError, match="collision"):
            TreeMerger().merge([a, b], tmp_path / "out")

    def test_destination_that_is_a_file_raises(self, tmp_path: Path) -> None:
        dest = tmp_path / "out"
        dest.write_text("not a dir", encoding="utf-8")
        a = _source(tmp_path / "a", {"platform/a.txt": "a"})

        with pytest.raises(MergeError):
            TreeMerger().merge([a], dest)

    def test_missing_content_root_raises_with_context(self, tmp_path: Path) -> None:
        missing = tmp_path / "gone"

        with pytest.raises(MergeError) as exc_info:
            TreeMerger().merge([missing], tmp_path / "out")

        assert exc_info.value.context["source"] == missing

    def test_merge_error_is_an_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            TreeMerger().merge([tmp_path / "gone"], tmp_path / "out")

    def test_failure_aborts_remaining_sources(self, tmp_path: Path) -> None:
        a = _source(tmp_path / "a", {"platform/thing": "file"})
        b = _source(tmp_path / "b", {"platform/thing/inner.txt": "dir"})
        c = _source(tmp_path / "c", {"foundation/late.txt": "late"})
        dest = tmp_path / "out"

        with pytest.raises(MergeError):
            TreeMerger().merge([a, b, c], dest)

        assert not (dest / "foundation").exists()

    def test_unreadable_layer_entry_raises_merge_error_with_source(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        a = _source(tmp_path / "a", {"platform/a.txt": "a"})
        blocked = tmp_path / "a" / "platform"
        real_is_dir = Path.is_dir

        def _is_dir(self: Path, *args, **kwargs) -> bool:
            if self == blocked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_is_dir(self, *args, **kwargs)

        monkeypatch.setattr(Path, "is_dir", _is_dir)

        with pytest.raises(MergeError) as exc_info:
            TreeMerger().merge([a], tmp_path / "out")

        assert exc_info.value.context["source"] == tmp_path / "a"
        assert exc_info.value.context["path"] == blocked

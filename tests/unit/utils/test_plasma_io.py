"""Tests for I/O helpers, file locks and project root resolution."""
from __future__ import annotations

import threading
from pathlib import Path

import pytest

from plasma.core.utils.io import (
    LockTimeoutError,
    acquire_file_lock,
    ensure_directory,
    iter_yaml_files,
    read_yaml,
)
from plasma.core.utils.merge import deep_merge
from plasma.core.utils.paths import PlasmaPathError, resolve_project_root, resolve_repo_path


class TestEnsureDirectory:
    def test_creates_nested_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"

        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_rejects_existing_file(self, tmp_path: Path) -> None:
        f = tmp_path / "f"
        f.write_text("x", encoding="utf-8")

        with pytest.raises(NotADirectoryError):
            ensure_directory(f)

    def test_fail_fast_when_create_disabled(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ensure_directory(tmp_path / "missing", create=False)


class TestYamlHelpers:
    def test_read_yaml_default_on_missing(self, tmp_path: Path) -> None:
        assert read_yaml(tmp_path / "nope.yaml", default={}) == {}

    def test_read_yaml_raises_when_asked(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_yaml(tmp_path / "nope.yaml", raise_on_error=True)

    def test_iter_yaml_files_prefers_yaml_over_yml(self, tmp_path: Path) -> None:
        for name in ("b.yml", "b.yaml", "a.yml", "c.txt"):
            (tmp_path / name).write_text("x: 1\n", encoding="utf-8")

        assert [p.name for p in iter_yaml_files(tmp_path)] == ["a.yml", "b.yaml"]


class TestDeepMerge:
    def test_nested_dicts_merge_and_lists_replace(self) -> None:
        base = {"a": {"x": 1, "y": [1, 2]}, "b": 1}
        override = {"a": {"y": [3]}, "c": 2}

        assert deep_merge(base, override) == {"a": {"x": 1, "y": [3]}, "b": 1, "c": 2}
        assert base == {"a": {"x": 1, "y": [1, 2]}, "b": 1}


class TestFileLock:
    def test_lock_uses_sidecar_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "src"

        with acquire_file_lock(target, timeout=1):
            assert (tmp_path / "out" / "src.lock").exists()
            assert not target.exists()

    def test_second_holder_times_out(self, tmp_path: Path) -> None:
        target = tmp_path / "out"
        errors: list[BaseException] = []

        def _contender() -> None:
            try:
                with acquire_file_lock(target, timeout=0.2, poll_interval=0.05):
                    pass
            except LockTimeoutError as exc:
                errors.append(exc)

        with acquire_file_lock(target, timeout=1):
            t = threading.Thread(target=_contender)
            t.start()
            t.join()

        assert len(errors) == 1

    def test_lock_is_released_after_context(self, tmp_path: Path) -> None:
        target = tmp_path / "out"

        with acquire_file_lock(target, timeout=1):
            pass
        with acquire_file_lock(target, timeout=0.2):
            pass

    def test_non_positive_timeout_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            with acquire_file_lock(tmp_path / "out", timeout=0):
                pass


class TestProjectRoot:
    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLASMA_PROJECT_ROOT", str(tmp_path))

        assert resolve_project_root() == tmp_path.resolve()

    def test_env_var_pointing_at_missing_path_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PLASMA_PROJECT_ROOT", str(tmp_path / "missing"))

        with pytest.raises(PlasmaPathError, match="missing"):
            resolve_project_root()

    def test_env_var_pointing_at_config_dir_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".plasma").mkdir()
        monkeypatch.setenv("PLASMA_PROJECT_ROOT", str(tmp_path / ".plasma"))

        with pytest.raises(PlasmaPathError):
            resolve_project_root()

    def test_cwd_with_config_dir_is_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".plasma").mkdir()
        monkeypatch.chdir(tmp_path)

        assert resolve_project_root() == tmp_path.resolve()

    def test_resolve_repo_path(self, tmp_path: Path) -> None:
        assert resolve_repo_path(tmp_path, "a/b") == tmp_path / "a" / "b"
        assert resolve_repo_path(tmp_path, "/abs") == Path("/abs")

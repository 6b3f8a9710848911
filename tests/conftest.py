import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'plasma' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from plasma.cli._logging import reset_logging
from plasma.data import clear_caches


@pytest.fixture(autouse=True)
def _isolate_plasma_env(tmp_path_factory, monkeypatch):
    """Keep developer config and PLASMA_* env vars out of every test."""
    for key in list(os.environ):
        if key.startswith("PLASMA_"):
            monkeypatch.delenv(key, raising=False)
    # ~/.plasma/config must not leak into config loading.
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    clear_caches()
    yield
    reset_logging()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """Isolated project root with an empty ``.plasma/config`` directory."""
    (tmp_path / ".plasma" / "config").mkdir(parents=True)
    monkeypatch.setenv("PLASMA_PROJECT_ROOT", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path

"""Pytest configuration for nsloader tests."""

import sys
from pathlib import Path

import pytest

from nsloader.autoload.autoloader import reset_default_autoloader
from nsloader.diagnostics import CollectingDiagnosticSink


@pytest.fixture(autouse=True)
def restore_import_state():
    """Undo meta path hooks and modules loaded by a test."""
    meta_path = list(sys.meta_path)
    modules = set(sys.modules)
    yield
    reset_default_autoloader()
    sys.meta_path[:] = meta_path
    for name in set(sys.modules) - modules:
        del sys.modules[name]


@pytest.fixture
def tmp_path(tmp_path: Path) -> Path:
    """Resolved tmp_path, so it compares equal to canonical directories."""
    return tmp_path.resolve()


@pytest.fixture
def sink() -> CollectingDiagnosticSink:
    return CollectingDiagnosticSink()


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    path = tmp_path / "modules"
    path.mkdir()
    return path


@pytest.fixture
def write_unit():
    """Write a source file below a root, creating parent directories."""

    def _write(root: Path, relative: str, content: str = "") -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write

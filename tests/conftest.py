"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local pysg package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of pysg modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("pysg"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's global config and PYSG__ env vars out of every test."""
    from pysg.config import loader

    config_path = tmp_path_factory.mktemp("home") / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", config_path)
    for key in list(os.environ):
        if key.upper().startswith("PYSG__"):
            monkeypatch.delenv(key)
    return config_path


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Create files under tmp_path from a {relative path: content} mapping."""

    def _make(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _make


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams a test may have replaced."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "pyproject.toml").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))


@pytest.fixture(autouse=True)
def _restore_default_backend():
    """Keep default-backend changes from leaking between tests."""
    from fieldplot.backend_context import set_default_backend

    yield
    set_default_backend(None)

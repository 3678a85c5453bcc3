"""
Tests for the package sources themselves.
"""

import warnings
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
SOURCES = sorted(p for p in PACKAGE_ROOT.rglob("*.py") if "tests" not in p.relative_to(PACKAGE_ROOT).parts)


@pytest.mark.parametrize("path", SOURCES, ids=lambda p: str(p.relative_to(PACKAGE_ROOT)))
def test_compiles_without_warnings(path):
    """Docstrings and literals carry no invalid escape sequences."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(path.read_text(), str(path), "exec")


def test_controller_is_checked():
    assert PACKAGE_ROOT / "session" / "controller.py" in SOURCES

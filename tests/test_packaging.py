"""
The service runs from backend/; installing it must not publish its short
top-level names (api, core, engines, main) into site-packages.
"""
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_no_top_level_packages_installed():
    config = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    setuptools = config["tool"]["setuptools"]
    assert setuptools["packages"] == []
    assert setuptools["py-modules"] == []
    assert "backend" in config["tool"]["pytest"]["ini_options"]["pythonpath"]

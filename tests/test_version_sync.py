#!/usr/bin/env python3
"""
Tests for version sync between VERSION, pyproject.toml, and the package.
"""

from pathlib import Path
import tomllib

import autoname


def _repo_root() -> Path:
	return Path(__file__).resolve().parent.parent


def test_version_file_matches_pyproject():
	version_file = (_repo_root() / "VERSION").read_text(encoding="utf-8").strip()
	pyproject = tomllib.loads((_repo_root() / "pyproject.toml").read_text(encoding="utf-8"))
	assert version_file == pyproject["project"]["version"]


def test_package_version_matches_file():
	version_file = (_repo_root() / "VERSION").read_text(encoding="utf-8").strip()
	assert autoname.__version__ == version_file

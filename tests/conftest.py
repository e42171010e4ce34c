"""Pytest fixtures for fpguard tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    """Create a temporary fpguard.toml file."""
    config_path: Path = tmp_path / "fpguard.toml"
    config_path.write_text(
        """
include = ["src/**/*.js"]
exclude = ["**/*.test.js"]
output_format = "machine"
show_source = false
jobs = 4

[rules]
MutableBinding = "error"
nativeloop = "warning"

[rules.ClassDeclaration]
severity = "off"

[ignores]
require_reason = false
disallow = ["TryCatch"]
max_per_file = 10
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / "fpguard.toml"
    config_path.write_text("invalid [ toml content")
    return config_path


@pytest.fixture
def invalid_config(tmp_path: Path) -> Path:
    """Create an fpguard.toml with invalid values."""
    config_path: Path = tmp_path / "fpguard.toml"
    config_path.write_text(
        """
output_format = "xml"
jobs = 0

[rules]
MutableBinding = "fatal"
NoSuchRule = "error"

[ignores]
disallow = ["FAKE001"]
"""
    )
    return config_path

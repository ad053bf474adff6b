"""
Unit tests for project structure validation.

Tests verify that the package layout and public modules exist and import.
"""

import importlib
from pathlib import Path

import pytest


class TestProjectStructure:
    """Test suite for validating project directory structure."""

    def test_required_files_exist(self, project_root: Path) -> None:
        """
        Test that packaging and documentation files exist.

        Args:
            project_root: Project root directory fixture.
        """
        # Arrange
        required_files = ["pyproject.toml", "DESIGN.md", "config/config.example.json"]

        # Act
        missing = [f for f in required_files if not (project_root / f).exists()]

        # Assert
        assert not missing, f"Missing required files: {missing}"

    @pytest.mark.parametrize(
        "module",
        [
            "sip_test_util",
            "sip_test_util.assertions",
            "sip_test_util.cli.main",
            "sip_test_util.config",
            "sip_test_util.logging_audit",
            "sip_test_util.models",
            "sip_test_util.polling",
            "sip_test_util.store",
            "sip_test_util.utils.exceptions",
        ],
    )
    def test_modules_importable(self, module: str) -> None:
        """
        Test that each public module imports.

        Args:
            module: Dotted module name.
        """
        assert importlib.import_module(module) is not None

    def test_package_has_version(self) -> None:
        import sip_test_util

        assert sip_test_util.__version__ == "0.1.0"

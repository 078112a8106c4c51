"""Test project setup and structure"""

import importlib
from pathlib import Path


def test_package_imports():
    """Verify all core dependencies are importable"""
    importlib.import_module("typer")
    importlib.import_module("rich")
    importlib.import_module("pydantic")
    importlib.import_module("yaml")
    importlib.import_module("boto3")
    importlib.import_module("kubernetes")


def test_directory_structure():
    """Verify project directory structure"""
    base_dir = Path(__file__).parent.parent

    assert (base_dir / "credmode").is_dir()
    assert (base_dir / "credmode" / "__init__.py").is_file()
    assert (base_dir / "credmode" / "providers").is_dir()
    assert (base_dir / "credmode" / "providers" / "aws" / "provider.yaml").is_file()
    assert (base_dir / "credmode" / "engine").is_dir()
    assert (base_dir / "credmode" / "cli.py").is_file()
    assert (base_dir / "tests").is_dir()
    assert (base_dir / "tests" / "unit").is_dir()
    assert (base_dir / "tests" / "integration").is_dir()

"""
Shared Test Configuration and Fixtures

Provides sample properties files, manifests and scaffold configurations for
the whole test suite.
"""

import hashlib
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from rockplugin.core.config.models import ScaffoldConfiguration


PROPS_TEMPLATE = """<Project>
  <PropertyGroup>
    <Version>{version}</Version>
    <Authors>Spark Development Network</Authors>
  </PropertyGroup>
</Project>
"""


@pytest.fixture
def props_file(tmp_path) -> Path:
    """Directory.Build.props declaring version 1.16.2."""
    path = tmp_path / "Directory.Build.props"
    path.write_text(PROPS_TEMPLATE.format(version="1.16.2"), encoding="utf-8")
    return path


@pytest.fixture
def file_hash() -> Callable[[Path], str]:
    """SHA-256 of a file's bytes, for asserting a file was left untouched."""
    def digest(path: Path) -> str:
        return hashlib.sha256(Path(path).read_bytes()).hexdigest()
    return digest


@pytest.fixture
def manifest_file(tmp_path) -> Path:
    """package.json still on version 1.16.0, written in a non-normalized style."""
    path = tmp_path / "package.json"
    path.write_text(
        '{"name": "@rockrms/obsidian-build-tools", "version": "1.16.0",\n'
        '  "main": "dist/index.js", "scripts": {"build": "tsc"}}',
        encoding="utf-8"
    )
    return path


@pytest.fixture
def scaffold_values() -> Dict[str, Any]:
    """Complete answers for the default questionnaire plus derived values."""
    return {
        "Organization": "Rock Solid Church Demo",
        "OrganizationCode": "com.rocksolidchurchdemo",
        "PluginName": "Check-in Labels",
        "PluginCode": "CheckinLabels",
        "RockVersion": "1.16.0",
        "ToolVersion": "1.16.2",
        "RockWebPath": "",
        "Obsidian": True,
        "RestApiSupport": False,
        "Copy": False,
    }


@pytest.fixture
def scaffold_configuration(scaffold_values) -> ScaffoldConfiguration:
    return ScaffoldConfiguration(scaffold_values)


@pytest.fixture
def rockweb_dir(tmp_path) -> Path:
    """A RockWeb directory recognizable by its web.config."""
    rockweb = tmp_path / "RockWeb"
    rockweb.mkdir()
    (rockweb / "web.config").write_text("<configuration />", encoding="utf-8")
    return rockweb


# Pytest Configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "cli: marks tests that drive the command line interface"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers automatically based on test location."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)

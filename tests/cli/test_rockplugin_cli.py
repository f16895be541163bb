"""
Tests for the rockplugin command line interface.

Drives the Typer application through CliRunner inside a temporary working
directory.
"""

import json

import pytest
import yaml
from typer.testing import CliRunner

from rockplugin import __version__
from rockplugin.cli.main import app
from rockplugin.versioning import read_manifest_version


CREATE_ARGS = [
    "create", "--non-interactive",
    "--organization", "Rock Solid Church Demo",
    "--organization-code", "com.rocksolidchurchdemo",
    "--plugin-name", "Check-in Labels",
    "--rock-version", "1.16.0",
    "--rock-web-path", "",
    "--obsidian",
    "--no-rest-api",
]


@pytest.fixture
def workspace(tmp_path, monkeypatch, props_file, manifest_file):
    """Working directory with Directory.Build.props at 1.16.2 and package.json at 1.16.0."""
    monkeypatch.chdir(tmp_path)
    for name in ("VERSION_SOURCE", "MANIFESTS", "MANIFEST_INDENT", "TEMPLATES_DIR", "VERBOSE"):
        monkeypatch.delenv(f"ROCKPLUGIN_{name}", raising=False)
    return tmp_path


@pytest.mark.cli
class TestMainApp:
    """Test the top-level application."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version_flag(self):
        result = self.runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"rockplugin version {__version__}" in result.output

    def test_help_lists_commands(self):
        result = self.runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "create" in result.output
        assert "version" in result.output

    def test_missing_config_file(self, workspace):
        result = self.runner.invoke(app, ["--config", "missing.yaml", "version", "show"])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output


@pytest.mark.cli
class TestVersionCommands:
    """Test version show, sync and check."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_show(self, workspace):
        result = self.runner.invoke(app, ["version", "show"])
        assert result.exit_code == 0
        assert result.output.strip() == "1.16.2"

    def test_show_without_props_fails(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = self.runner.invoke(app, ["version", "show"])
        assert result.exit_code == 1
        assert "VersionNotFoundError" in result.output

    def test_show_with_non_utf8_props(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "Directory.Build.props").write_bytes(
            "<Authors>\xe9glise</Authors><Version>1.16.2</Version>".encode("latin-1")
        )

        result = self.runner.invoke(app, ["version", "show"])

        assert result.exit_code == 1
        assert "VersionNotFoundError" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_show_with_props_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "Directory.Build.props").mkdir()

        result = self.runner.invoke(app, ["version", "show"])

        assert result.exit_code == 1
        assert "VersionNotFoundError" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_check_with_non_utf8_manifest(self, workspace, manifest_file):
        manifest_file.write_bytes('{"author": "\xe9glise", "version": "1.16.2"}'.encode("latin-1"))

        result = self.runner.invoke(app, ["version", "check"])

        assert result.exit_code == 1
        assert "ManifestError" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_sync_without_version_writes_nothing(self, workspace, props_file, manifest_file, file_hash):
        props_file.write_text("<Project>\n  <PropertyGroup />\n</Project>\n", encoding="utf-8")
        before = file_hash(manifest_file)

        result = self.runner.invoke(app, ["version", "sync"])

        assert result.exit_code == 1
        assert "VersionNotFoundError" in result.output
        assert file_hash(manifest_file) == before

    def test_check_names_props_option(self, workspace):
        (workspace / "Shared.props").write_text("<Version>2.0.0</Version>", encoding="utf-8")

        result = self.runner.invoke(app, ["version", "check", "--props", "Shared.props"])

        assert result.exit_code == 1
        assert "Shared.props" in result.output
        assert "Directory.Build.props" not in result.output

    def test_check_fails_on_drift(self, workspace, manifest_file):
        before = manifest_file.read_bytes()

        result = self.runner.invoke(app, ["version", "check"])

        assert result.exit_code == 1
        assert "VersionMismatchError" in result.output
        assert "rockplugin version sync" in result.output
        assert manifest_file.read_bytes() == before

    def test_sync_then_check(self, workspace, manifest_file):
        result = self.runner.invoke(app, ["version", "sync"])
        assert result.exit_code == 0
        assert read_manifest_version(manifest_file) == "1.16.2"

        result = self.runner.invoke(app, ["version", "check"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_sync_twice_is_stable(self, workspace, manifest_file):
        self.runner.invoke(app, ["version", "sync"])
        first = manifest_file.read_bytes()

        result = self.runner.invoke(app, ["version", "sync"])
        assert result.exit_code == 0
        assert "1.16.2" in result.output
        assert manifest_file.read_bytes() == first

    def test_explicit_manifest_and_props(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "Shared.props").write_text("<Version>2.0.0</Version>", encoding="utf-8")
        manifest = tmp_path / "web.json"
        manifest.write_text('{"name": "web", "version": "1.0.0"}', encoding="utf-8")

        result = self.runner.invoke(app, ["version", "sync", "web.json", "--props", "build/Shared.props"])

        assert result.exit_code == 0
        assert json.loads(manifest.read_text(encoding="utf-8"))["version"] == "2.0.0"

    def test_config_file_lists_manifests(self, workspace, manifest_file):
        second = workspace / "obsidian" / "package.json"
        second.parent.mkdir()
        second.write_text('{"version": "0.1.0"}', encoding="utf-8")
        (workspace / "rockplugin.yaml").write_text(
            yaml.safe_dump({"manifests": ["package.json", "obsidian/package.json"], "manifest_indent": 2}),
            encoding="utf-8"
        )

        result = self.runner.invoke(app, ["version", "sync"])

        assert result.exit_code == 0
        assert read_manifest_version(manifest_file) == "1.16.2"
        assert read_manifest_version(second) == "1.16.2"
        assert second.read_text(encoding="utf-8") == '{\n  "version": "1.16.2"\n}\n'

    def test_check_reports_every_mismatch(self, workspace):
        (workspace / "other.json").write_text('{"version": "1.0.0"}', encoding="utf-8")

        result = self.runner.invoke(app, ["version", "check", "package.json", "other.json"])

        assert result.exit_code == 1
        assert result.output.count("VersionMismatchError") == 2

    def test_env_overrides_manifests(self, workspace, monkeypatch):
        other = workspace / "other.json"
        other.write_text('{"version": "1.16.2"}', encoding="utf-8")
        monkeypatch.setenv("ROCKPLUGIN_MANIFESTS", "other.json")

        result = self.runner.invoke(app, ["version", "check"])
        assert result.exit_code == 0


@pytest.mark.cli
class TestCreateCommand:
    """Test plugin project creation."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_create_non_interactive(self, workspace):
        result = self.runner.invoke(app, CREATE_ARGS + ["-o", str(workspace)])

        assert result.exit_code == 0, result.output
        assert "created successfully" in result.output
        project = workspace / "com.rocksolidchurchdemo.CheckinLabels"
        assert (project / "com.rocksolidchurchdemo.CheckinLabels.csproj").is_file()
        assert (workspace / "com.rocksolidchurchdemo.CheckinLabels.Obsidian" / "package.json").is_file()

    def test_create_without_obsidian(self, workspace):
        args = [a if a != "--obsidian" else "--no-obsidian" for a in CREATE_ARGS]
        result = self.runner.invoke(app, args + ["-o", str(workspace)])

        assert result.exit_code == 0, result.output
        assert not (workspace / "com.rocksolidchurchdemo.CheckinLabels.Obsidian").exists()

    def test_create_from_answers_file(self, workspace, rockweb_dir):
        answers = workspace / "plugin.yaml"
        answers.write_text(yaml.safe_dump({
            "Organization": "Rock Solid Church Demo",
            "OrganizationCode": "com.rocksolidchurchdemo",
            "PluginName": "Labels",
            "RockVersion": "1.16.0",
            "RockWebPath": "RockWeb",
            "Obsidian": False,
            "RestApiSupport": True,
            "Copy": True,
        }), encoding="utf-8")

        result = self.runner.invoke(app, ["create", "--non-interactive", "--answers", str(answers),
                                          "-o", str(workspace)])

        assert result.exit_code == 0, result.output
        csproj = (workspace / "com.rocksolidchurchdemo.Labels" / "com.rocksolidchurchdemo.Labels.csproj")
        content = csproj.read_text(encoding="utf-8")
        assert "RockRMS.Rock.Rest" in content
        assert "<RockWebPath>" in content

    def test_missing_answer_aborts(self, workspace):
        args = [a for a in CREATE_ARGS if a not in ("--plugin-name", "Check-in Labels")]
        result = self.runner.invoke(app, args + ["-o", str(workspace)])

        assert result.exit_code == 1
        assert "PromptAbortedError" in result.output
        assert not (workspace / "com.rocksolidchurchdemo.CheckinLabels").exists()

    def test_unsupported_rock_version(self, workspace):
        args = [a if a != "1.16.0" else "1.15.0" for a in CREATE_ARGS]
        result = self.runner.invoke(app, args + ["-o", str(workspace)])

        assert result.exit_code == 1
        assert "ConfigurationError" in result.output

    def test_existing_project_directory(self, workspace):
        (workspace / "com.rocksolidchurchdemo.CheckinLabels").mkdir()

        result = self.runner.invoke(app, CREATE_ARGS + ["-o", str(workspace)])

        assert result.exit_code == 1
        assert "already exists" in result.output

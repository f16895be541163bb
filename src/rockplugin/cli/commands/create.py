"""
Create Command

Scaffolds a new plugin. Anything not given on the command line (or in an
answers file) is asked for interactively.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Annotated

import typer
import yaml

from rockplugin.cli.error_handling import handle_error
from rockplugin.cli.utils import (
    console,
    load_tool_config,
    print_configuration_summary,
    print_header,
    print_success,
)
from rockplugin.core.exceptions import ConfigurationError, RockPluginError
from rockplugin.scaffold import (
    PluginGenerator,
    PromptToolkitDriver,
    ScriptedDriver,
    collect_configuration,
    default_questions,
)

logger = logging.getLogger(__name__)


def load_answers(answers_file: Optional[Path]) -> Dict[str, Any]:
    """Load preset answers from a YAML file."""
    if answers_file is None:
        return {}
    try:
        with open(answers_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (IOError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load answers file {answers_file}: {e}", cause=e)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Answers file {answers_file} must contain a mapping")
    return data


def create(
    ctx: typer.Context,
    output_dir: Annotated[Optional[Path], typer.Option("--output-dir", "-o", help="Directory to create the projects in")] = None,
    answers: Annotated[Optional[Path], typer.Option("--answers", help="YAML file with preset answers")] = None,
    organization: Annotated[Optional[str], typer.Option("--organization", help="Organization name")] = None,
    organization_code: Annotated[Optional[str], typer.Option("--organization-code", help="Organization code, e.g. com.rocksolidchurchdemo")] = None,
    plugin_name: Annotated[Optional[str], typer.Option("--plugin-name", help="Plugin name")] = None,
    rock_version: Annotated[Optional[str], typer.Option("--rock-version", help="Target Rock version")] = None,
    rock_web_path: Annotated[Optional[str], typer.Option("--rock-web-path", help="Path to RockWeb, relative to the output directory")] = None,
    obsidian: Annotated[Optional[bool], typer.Option("--obsidian/--no-obsidian", help="Create the Obsidian project")] = None,
    rest_api: Annotated[Optional[bool], typer.Option("--rest-api/--no-rest-api", help="Include REST API support")] = None,
    copy: Annotated[Optional[bool], typer.Option("--copy/--no-copy", help="Copy build artifacts to RockWeb")] = None,
    non_interactive: Annotated[bool, typer.Option("--non-interactive", help="Never prompt; missing answers abort")] = False,
):
    """
    Create the C# project (and optionally the Obsidian project) for a new plugin.

    [bold cyan]Examples:[/bold cyan]

    • Interactive: [green]rockplugin create[/green]
    • Scripted: [green]rockplugin create --answers plugin.yaml --non-interactive[/green]
    """
    target_dir = (output_dir or Path.cwd()).resolve()

    try:
        config = load_tool_config(ctx)
        presets = load_answers(answers)
        presets.update({key: value for key, value in {
            "Organization": organization,
            "OrganizationCode": organization_code,
            "PluginName": plugin_name,
            "RockVersion": rock_version,
            "RockWebPath": rock_web_path,
            "Obsidian": obsidian,
            "RestApiSupport": rest_api,
            "Copy": copy,
        }.items() if value is not None})
        logger.debug(f"Preset answers: {sorted(presets)}")

        if not non_interactive:
            print_header("Create Rock Plugin", f"Projects will be created in {target_dir}")

        driver = ScriptedDriver() if non_interactive else PromptToolkitDriver()
        configuration = collect_configuration(default_questions(target_dir), driver, presets)

        if config.verbose:
            print_configuration_summary(configuration.to_dict())

        generator = PluginGenerator(templates_dir=config.templates_dir)
        written = generator.generate(configuration, target_dir)
    except RockPluginError as e:
        handle_error(e)

    for path in written:
        print_success(f"Created {path.relative_to(target_dir)}")
    console.print(f"\n[bold green]Plugin '{configuration['PluginName']}' created successfully![/bold green]")

"""
Version Command

Keeps package manifests on the version declared in Directory.Build.props.
``sync`` is the deliberate release-prep step, ``check`` the CI gate.
"""

from pathlib import Path
from typing import List, Optional, Annotated

import typer

from rockplugin.cli.error_handling import handle_error, report_error
from rockplugin.cli.utils import console, load_tool_config, print_success
from rockplugin.core.exceptions import RockPluginError
from rockplugin.versioning import VersionSynchronizer, load_canonical_version

app = typer.Typer(
    name="version",
    help="Synchronize and verify package manifest versions",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

PropsOption = Annotated[
    Optional[Path],
    typer.Option("--props", "-p", help="Properties file with the canonical <Version> element")
]
ManifestsArgument = Annotated[
    Optional[List[Path]],
    typer.Argument(help="Manifests to process (defaults to the configured manifests)", show_default=False)
]


def _resolve(ctx: typer.Context, props: Optional[Path], manifests: Optional[List[Path]]):
    config = load_tool_config(
        ctx,
        version_source=props,
        manifests=manifests or None,
    )
    version = load_canonical_version(config.version_source)
    return config, version


@app.command()
def show(
    ctx: typer.Context,
    props: PropsOption = None,
):
    """
    Print the canonical version.
    """
    try:
        _, version = _resolve(ctx, props, None)
    except RockPluginError as e:
        handle_error(e)
    typer.echo(version)


@app.command()
def sync(
    ctx: typer.Context,
    manifests: ManifestsArgument = None,
    props: PropsOption = None,
):
    """
    Write the canonical version into each manifest.

    [bold cyan]Examples:[/bold cyan]

    • Configured manifests: [green]rockplugin version sync[/green]
    • Explicit manifest: [green]rockplugin version sync src/package.json --props Directory.Build.props[/green]
    """
    try:
        config, version = _resolve(ctx, props, manifests)
        synchronizer = VersionSynchronizer(version, indent=config.manifest_indent,
                                           source=config.version_source)
        changed = synchronizer.sync_all(config.manifests)
    except RockPluginError as e:
        handle_error(e)

    for manifest in config.manifests:
        if manifest in changed:
            print_success(f"Set version of {manifest} to {version}")
        else:
            console.print(f"[dim]{manifest} already at {version}[/dim]")


@app.command()
def check(
    ctx: typer.Context,
    manifests: ManifestsArgument = None,
    props: PropsOption = None,
):
    """
    Fail if any manifest does not carry the canonical version.

    Prints nothing when every manifest matches. Never modifies files.
    """
    try:
        config, version = _resolve(ctx, props, manifests)
        synchronizer = VersionSynchronizer(version, source=config.version_source)
        mismatches = synchronizer.find_mismatches(config.manifests)
    except RockPluginError as e:
        handle_error(e)

    if mismatches:
        for mismatch in mismatches[:-1]:
            report_error(mismatch)
        handle_error(mismatches[-1])

"""CLI entry point for modl-packager.

Invoked as::

    modl-packager [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m modl_packager.cli.main

Commands
--------
- ``package``   Build the ``.modl`` bundle described by a packaging file.
- ``manifest``  Render ``module.xml`` without building a bundle.
- ``validate``  Check required fields and scopes.
- ``version``   Show version information.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from modl_packager.errors import ModlPackagerError

console = Console()
err_console = Console(stderr=True)

_CONFIG_ARGUMENT = click.argument(
    "config_file",
    metavar="CONFIG",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _configure_logging(verbose: bool) -> None:
    """Route package log records to a rich handler on stderr."""
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    package_logger = logging.getLogger("modl_packager")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(label: str, exc: ModlPackagerError) -> NoReturn:
    console.print(f"[red]{label}:[/red] {escape(str(exc))}")
    cause = exc.__cause__
    if cause is not None and str(cause) not in str(exc):
        console.print(f"  [dim]Caused by:[/dim] {escape(str(cause))}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="modl-packager")
def cli() -> None:
    """Build Ignition .modl module bundles from a YAML descriptor"""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from modl_packager import __version__

    console.print(f"[bold]modl-packager[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# package
# ---------------------------------------------------------------------------


@cli.command(name="package")
@_CONFIG_ARGUMENT
@click.option(
    "--project-root",
    "-p",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help=(
        "Directory archive paths are resolved against. Overrides the config file;"
        " an output directory under the old root moves with it."
    ),
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory the bundle is written to. Overrides the config file.",
)
@click.option(
    "--artifact-id",
    default=None,
    help="First part of the bundle file name. Default: the module id.",
)
@click.option(
    "--artifact-version",
    default=None,
    help="Second part of the bundle file name. Default: the module version.",
)
@click.option(
    "--extension",
    default=None,
    help="Bundle file extension. Default: modl.",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output summary as JSON.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log every staging step.",
)
def package_command(
    config_file: Path,
    project_root: Path | None,
    output_dir: Path | None,
    artifact_id: str | None,
    artifact_version: str | None,
    extension: str | None,
    json_output: bool,
    verbose: bool,
) -> None:
    """Build the module bundle described by CONFIG.

    Examples:

    \b
        modl-packager package modl.yaml
        modl-packager package modl.yaml --output-dir target
        modl-packager package modl.yaml --artifact-id my-module --artifact-version 1.2.0
    """
    from modl_packager.bundler.assembler import BundleAssembler
    from modl_packager.descriptor.loader import load_config

    _configure_logging(verbose)

    try:
        config = load_config(config_file)
    except ModlPackagerError as exc:
        _fail("Configuration error", exc)

    if project_root is not None:
        config = config.with_project_root(project_root)

    overrides: dict[str, object] = {}
    if output_dir is not None:
        overrides["output_dir"] = output_dir.resolve()
    if artifact_id is not None:
        overrides["artifact_id"] = artifact_id
    if artifact_version is not None:
        overrides["artifact_version"] = artifact_version
    if extension is not None:
        overrides["bundle_extension"] = extension.lstrip(".")
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        bundle_path = BundleAssembler().package(config)
    except ModlPackagerError as exc:
        _fail("Packaging error", exc)

    descriptor = config.descriptor
    if json_output:
        summary = {
            "bundle": str(bundle_path),
            "module_id": descriptor.id,
            "version": descriptor.version,
            "archives": len(descriptor.archives),
            "entry_points": len(descriptor.entry_points),
            "dependencies": len(descriptor.dependencies),
        }
        console.print_json(json.dumps(summary, indent=2))
        return

    console.print(
        Panel(
            f"[bold green]{bundle_path}[/bold green]",
            title="Module Package Created",
            expand=False,
        )
    )
    console.print(f"  Module        : {descriptor.id} ({descriptor.name})")
    console.print(f"  Version       : {descriptor.version}")
    console.print(f"  Archives      : {len(descriptor.archives)}")
    console.print(f"  Hooks         : {len(descriptor.entry_points)}")
    console.print(f"  Dependencies  : {len(descriptor.dependencies)}")


# ---------------------------------------------------------------------------
# manifest
# ---------------------------------------------------------------------------


@cli.command(name="manifest")
@_CONFIG_ARGUMENT
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write module.xml to this file instead of standard output.",
)
def manifest_command(config_file: Path, output: Path | None) -> None:
    """Render the module.xml for CONFIG without building a bundle.

    CONFIG may be a full packaging file or a bare module descriptor.
    """
    from modl_packager.bundler.manifest import ManifestGenerator
    from modl_packager.descriptor.loader import load_descriptor

    generator = ManifestGenerator()
    try:
        descriptor = load_descriptor(config_file)
        if output is not None:
            generator.write(descriptor, output)
        else:
            document = generator.generate(descriptor)
    except ModlPackagerError as exc:
        _fail("Manifest error", exc)

    if output is not None:
        console.print(f"[green]Manifest written to:[/green] {output}")
        return
    click.echo(document.decode("utf-8"), nl=False)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@_CONFIG_ARGUMENT
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output results as JSON.",
)
def validate_command(config_file: Path, json_output: bool) -> None:
    """Check CONFIG for missing required fields and scope problems.

    Scope problems are reported but do not fail validation; a missing
    id, name or version does (exit code 1).
    """
    from modl_packager.descriptor.loader import load_descriptor
    from modl_packager.descriptor.validation import check_scopes, validate_required_fields
    from modl_packager.errors import MissingRequiredFieldError

    try:
        descriptor = load_descriptor(config_file)
    except ModlPackagerError as exc:
        _fail("Configuration error", exc)

    missing: str | None = None
    try:
        validate_required_fields(descriptor)
    except MissingRequiredFieldError as exc:
        missing = exc.field_name
    issues = check_scopes(descriptor)

    if json_output:
        output = {
            "valid": missing is None,
            "missing_field": missing,
            "scope_issues": [
                {
                    "type": issue.issue_type.value,
                    "kind": issue.kind,
                    "value": issue.value,
                    "scope": issue.scope,
                    "message": issue.message,
                }
                for issue in issues
            ],
        }
        console.print_json(json.dumps(output, indent=2))
    else:
        if issues:
            table = Table(title="Scope Issues", show_lines=False)
            table.add_column("Kind", style="bold")
            table.add_column("Entry")
            table.add_column("Scope")
            table.add_column("Problem")
            for issue in issues:
                table.add_row(
                    issue.kind,
                    escape(issue.value or "(none)"),
                    escape(issue.scope or "-"),
                    f"[yellow]{issue.issue_type.value}[/yellow]",
                )
            console.print(table)
        if missing is not None:
            console.print(f"[red]Module {missing} is required.[/red]")
        else:
            console.print("\n[green]Required fields present.[/green]")

    if missing is not None:
        sys.exit(1)


if __name__ == "__main__":
    cli()

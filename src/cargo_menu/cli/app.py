"""CLI main module for cargo-menu."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import NoReturn

import typer

from cargo_menu.cli.interactive import InteractiveMenu
from cargo_menu.cli.render import Renderer
from cargo_menu.config import Settings, get_settings
from cargo_menu.core.args import SEPARATOR
from cargo_menu.core.commands import assemble_command, parse_command_line
from cargo_menu.core.metadata import MetadataReader, metadata_sources
from cargo_menu.errors import CargoMenuError, MetadataError
from cargo_menu.menus import COMMAND_MENUS, CUSTOM_COMMAND, menu_by_name
from cargo_menu.runner import CommandDispatcher

app = typer.Typer(
    name="cargo-menu",
    help="Build and run cargo commands from a keyboard menu.",
    add_completion=False,
    rich_markup_mode="rich",
)

_PASSTHROUGH_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}


def _exit_with_error(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj
    if not isinstance(settings, Settings):
        raise typer.Exit(1)
    return settings


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    cargo: str | None = typer.Option(None, "--cargo", help="Path to the cargo executable"),
    project: Path | None = typer.Option(None, "--project", "-C", help="Project root"),  # noqa: B008
    naming: str | None = typer.Option(None, "--naming", help="Output naming: shared, command or project"),
) -> None:
    try:
        ctx.obj = get_settings(cargo_path=cargo, project_dir=project, output_naming=naming)
    except CargoMenuError as exc:
        _exit_with_error(str(exc))
    if ctx.invoked_subcommand is None:
        menu(ctx)


@app.command()
def menu(ctx: typer.Context) -> None:
    """Open the interactive menu."""

    InteractiveMenu(_settings(ctx), renderer=Renderer()).run()


def _dispatch(settings: Settings, subcommand: str, args: list[str], *, dry_run: bool) -> None:
    command = assemble_command(
        subcommand,
        args,
        cargo_path=settings.cargo_path,
        policy=settings.separator_policy(),
    )
    if dry_run:
        typer.echo(command)
        return
    dispatcher = CommandDispatcher(settings.project_state(), naming=settings.output_naming)
    returncode = asyncio.run(dispatcher.dispatch(subcommand, command))
    if returncode != 0:
        raise typer.Exit(returncode)


@app.command("exec", context_settings=_PASSTHROUGH_CONTEXT)
def exec_command(
    ctx: typer.Context,
    subcommand: str = typer.Argument(..., help="Cargo subcommand, e.g. build or test"),
    args: list[str] | None = typer.Argument(None, help="Flags for the subcommand"),  # noqa: B008
    passthrough: str | None = typer.Option(None, "--pass", help="Text passed to the program after `--`"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the command instead of running it"),
) -> None:
    """Assemble and run one cargo command."""

    tokens = list(args or [])
    if passthrough:
        tokens.extend([SEPARATOR, passthrough])
    _dispatch(_settings(ctx), subcommand, tokens, dry_run=dry_run)


@app.command()
def custom(
    ctx: typer.Context,
    line: str = typer.Argument(..., help="Subcommand and arguments, e.g. 'test --release -- --nocapture'"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the command instead of running it"),
) -> None:
    """Run a free-form cargo command line."""

    try:
        subcommand, args = parse_command_line(line)
    except CargoMenuError as exc:
        _exit_with_error(str(exc))
    _dispatch(_settings(ctx), subcommand, args, dry_run=dry_run)


def _print_candidates(settings: Settings, kind: str) -> None:
    sources = metadata_sources(MetadataReader(strict=settings.strict_metadata))
    source = sources.get(kind)
    if source is None:
        _exit_with_error(f"unknown target kind {kind!r} (expected one of: {', '.join(sorted(sources))})")
    try:
        names = source(settings.project_state())
    except MetadataError as exc:
        _exit_with_error(str(exc))
    if not names:
        typer.echo("(none)")
        return
    for name in names:
        typer.echo(name)


@app.command()
def targets(
    ctx: typer.Context,
    kind: str = typer.Option("bin", "--kind", "-k", help="Target kind: bin, example, test or bench"),
) -> None:
    """List target names from cargo metadata."""

    _print_candidates(_settings(ctx), kind)


@app.command()
def features(ctx: typer.Context) -> None:
    """List feature names from cargo metadata."""

    _print_candidates(_settings(ctx), "feature")


@app.command()
def show(
    name: str | None = typer.Argument(None, help="Command menu to show; all when omitted"),
) -> None:
    """Print the menu table."""

    renderer = Renderer()
    if name is None:
        renderer.command_list([*COMMAND_MENUS.values(), CUSTOM_COMMAND])
        for command_menu in COMMAND_MENUS.values():
            renderer.menu(command_menu)
        return
    try:
        renderer.menu(menu_by_name(name))
    except CargoMenuError as exc:
        _exit_with_error(str(exc))

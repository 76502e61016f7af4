"""Asynchronous dispatch of assembled cargo commands."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from loguru import logger
from rich.console import Console
from rich.markup import escape

from cargo_menu.core.types import ProjectState
from cargo_menu.errors import ConfigurationError

SurfaceNamer = Callable[[str, ProjectState], str]
_STREAM_LIMIT = 1024 * 1024
_READ_CHUNK = 64 * 1024


def shared_surface_name(subcommand: str, state: ProjectState) -> str:
    return "*cargo*"


def command_surface_name(subcommand: str, state: ProjectState) -> str:
    return f"*cargo {subcommand}*"


def project_surface_name(subcommand: str, state: ProjectState) -> str:
    return f"*cargo: {state.root.name}*"


NAMING_STRATEGIES: dict[str, SurfaceNamer] = {
    "shared": shared_surface_name,
    "command": command_surface_name,
    "project": project_surface_name,
}


def resolve_naming(strategy: str | SurfaceNamer) -> SurfaceNamer:
    if callable(strategy):
        return strategy
    try:
        return NAMING_STRATEGIES[strategy]
    except KeyError:
        known = ", ".join(sorted(NAMING_STRATEGIES))
        raise ConfigurationError(f"unknown output naming strategy {strategy!r} (expected one of: {known})") from None


class OutputSurface(Protocol):
    name: str

    def start(self, command: str) -> None: ...

    def write(self, line: str) -> None: ...

    def finish(self, returncode: int) -> None: ...


class ConsoleSurface:
    """Output surface that streams process output to a rich console."""

    def __init__(self, name: str, console: Console | None = None) -> None:
        self.name = name
        self.console = console or Console()

    def start(self, command: str) -> None:
        self.console.rule(f"[bold]{escape(self.name)}[/bold]")
        self.console.print(f"[dim]$ {escape(command)}[/dim]")

    def write(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False)

    def finish(self, returncode: int) -> None:
        if returncode == 0:
            self.console.print("[green]finished[/green]")
        else:
            self.console.print(f"[bold red]exited abnormally with code {returncode}[/bold red]")


async def _stream_lines(stream: asyncio.StreamReader, surface: OutputSurface) -> None:
    """Forward output line by line; a line longer than the limit is flushed in pieces."""

    pending = b""
    while chunk := await stream.read(_READ_CHUNK):
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            surface.write(line.decode("utf-8", errors="replace").rstrip("\r"))
        while len(pending) >= _STREAM_LIMIT:
            surface.write(pending[:_STREAM_LIMIT].decode("utf-8", errors="replace"))
            pending = pending[_STREAM_LIMIT:]
    if pending:
        surface.write(pending.decode("utf-8", errors="replace").rstrip("\r"))


async def run_command(command: str, *, cwd: Path, surface: OutputSurface) -> int:
    """Run `command` through the shell, streaming merged stdout and stderr to `surface`."""

    logger.info("command.start surface={} cwd={} command={}", surface.name, cwd, command)
    surface.start(command)
    process = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    try:
        assert process.stdout is not None
        await _stream_lines(process.stdout, surface)
        returncode = await process.wait()
    except asyncio.CancelledError:
        logger.info("command.cancelled surface={}", surface.name)
        raise
    finally:
        if process.returncode is None:
            process.terminate()
            await process.wait()
    surface.finish(returncode)
    logger.info("command.finish surface={} returncode={}", surface.name, returncode)
    return returncode


class CommandDispatcher:
    """Pairs a project with an output naming strategy and runs commands in it."""

    def __init__(
        self,
        state: ProjectState,
        *,
        naming: str | SurfaceNamer = "shared",
        console: Console | None = None,
    ) -> None:
        self.state = state
        self.naming = resolve_naming(naming)
        self.console = console or Console()

    def surface_for(self, subcommand: str) -> ConsoleSurface:
        return ConsoleSurface(self.naming(subcommand, self.state), console=self.console)

    async def dispatch(self, subcommand: str, command: str) -> int:
        return await run_command(command, cwd=self.state.root, surface=self.surface_for(subcommand))

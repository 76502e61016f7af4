from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest
from rich.console import Console

from cargo_menu.core.types import ProjectState
from cargo_menu.errors import ConfigurationError
from cargo_menu.runner import (
    CommandDispatcher,
    ConsoleSurface,
    resolve_naming,
    run_command,
)


class RecordingSurface:
    def __init__(self, name: str = "*cargo*") -> None:
        self.name = name
        self.started: list[str] = []
        self.lines: list[str] = []
        self.returncodes: list[int] = []

    def start(self, command: str) -> None:
        self.started.append(command)

    def write(self, line: str) -> None:
        self.lines.append(line)

    def finish(self, returncode: int) -> None:
        self.returncodes.append(returncode)


def _python(code: str) -> str:
    return f'"{sys.executable}" -c "{code}"'


def test_naming_strategies(tmp_path: Path) -> None:
    state = ProjectState(root=tmp_path / "demo")
    assert resolve_naming("shared")("test", state) == "*cargo*"
    assert resolve_naming("command")("test", state) == "*cargo test*"
    assert resolve_naming("project")("test", state) == "*cargo: demo*"


def test_custom_naming_callable(tmp_path: Path) -> None:
    def naming(subcommand: str, state: ProjectState) -> str:
        return f"{state.root.name}/{subcommand}"

    dispatcher = CommandDispatcher(ProjectState(root=tmp_path), naming=naming)
    assert dispatcher.surface_for("build").name == f"{tmp_path.name}/build"


def test_unknown_naming_strategy() -> None:
    with pytest.raises(ConfigurationError):
        resolve_naming("per-buffer")


def test_run_command_streams_merged_output(tmp_path: Path) -> None:
    surface = RecordingSurface()
    code = "import sys; print('compiling'); print('warning: unused', file=sys.stderr)"
    command = _python(code)

    returncode = asyncio.run(run_command(command, cwd=tmp_path, surface=surface))

    assert returncode == 0
    assert surface.started == [command]
    assert sorted(surface.lines) == ["compiling", "warning: unused"]
    assert surface.returncodes == [0]


def test_run_command_reports_failure_without_raising(tmp_path: Path) -> None:
    surface = RecordingSurface()
    returncode = asyncio.run(run_command(_python("import sys; sys.exit(101)"), cwd=tmp_path, surface=surface))
    assert returncode == 101
    assert surface.returncodes == [101]


def test_run_command_uses_project_root(tmp_path: Path) -> None:
    surface = RecordingSurface()
    asyncio.run(run_command(_python("import os; print(os.getcwd())"), cwd=tmp_path, surface=surface))
    assert Path(surface.lines[0]).resolve() == tmp_path.resolve()


def test_dispatcher_writes_to_named_console_surface(tmp_path: Path) -> None:
    console = Console(record=True, width=120)
    dispatcher = CommandDispatcher(ProjectState(root=tmp_path), naming="command", console=console)

    returncode = asyncio.run(dispatcher.dispatch("build", _python("print('Finished dev profile')")))

    text = console.export_text()
    assert returncode == 0
    assert "*cargo build*" in text
    assert "Finished dev profile" in text
    assert "finished" in text


def test_console_surface_reports_abnormal_exit() -> None:
    console = Console(record=True, width=120)
    surface = ConsoleSurface("*cargo*", console=console)
    surface.finish(2)
    assert "exited abnormally with code 2" in console.export_text()


def test_run_command_handles_lines_longer_than_stream_limit(tmp_path: Path) -> None:
    surface = RecordingSurface()
    code = "import sys; sys.stdout.write('x' * (2 * 1024 * 1024)); sys.stdout.flush(); print(); print('done')"

    returncode = asyncio.run(run_command(_python(code), cwd=tmp_path, surface=surface))

    assert returncode == 0
    assert surface.returncodes == [0]
    assert sum(len(line) for line in surface.lines[:-1]) == 2 * 1024 * 1024
    assert surface.lines[-1] == "done"


def test_run_command_keeps_unterminated_last_line(tmp_path: Path) -> None:
    surface = RecordingSurface()
    code = "import sys; sys.stdout.write('first\\nno newline')"
    asyncio.run(run_command(_python(code), cwd=tmp_path, surface=surface))
    assert surface.lines == ["first", "no newline"]

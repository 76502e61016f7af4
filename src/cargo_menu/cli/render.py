"""CLI renderer for cargo-menu."""

from __future__ import annotations

from collections.abc import Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cargo_menu.core.types import ProjectState
from cargo_menu.menus import CommandMenu
from cargo_menu.session import MenuSession


class Renderer:
    """Terminal renderer using Rich for output and prompt_toolkit for keys and values."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    @property
    def prompt_session(self) -> PromptSession[str]:
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        return self._prompt_session

    def welcome(self, state: ProjectState) -> None:
        self.console.print("[bold blue]cargo-menu[/bold blue]")
        self.console.print(f"[bold]Project:[/bold] [cyan]{escape(str(state.root))}[/cyan]")
        self.console.print(f"[bold]Cargo:[/bold] [magenta]{escape(state.cargo_path)}[/magenta]")

    def info(self, message: str) -> None:
        self.console.print(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def command_list(self, menus: Iterable[CommandMenu]) -> None:
        table = Table(title="Commands", show_header=False, box=None, padding=(0, 2))
        for menu in menus:
            table.add_row(f"[bold cyan]{escape(menu.key)}[/bold cyan]", menu.description)
        table.add_row("[bold cyan]q[/bold cyan]", "Quit")
        self.console.print(table)

    def menu(self, menu: CommandMenu, session: MenuSession | None = None) -> None:
        self.console.rule(f"[bold]{escape(menu.description)}[/bold]")
        for group in menu.groups:
            table = Table(title=group.title, title_justify="left", show_header=False, box=None, padding=(0, 2))
            for flag in group.flags:
                active = session is not None and session.is_active(flag.key)
                marker = "[green]*[/green]" if active else " "
                rendered = self._flag_text(flag.argument, session.value_of(flag.key) if active and session else None)
                style = "bold green" if active else "dim"
                table.add_row(
                    marker,
                    f"[bold cyan]{escape(flag.key)}[/bold cyan]",
                    flag.description,
                    f"[{style}]{escape(rendered)}[/{style}]",
                )
            self.console.print(table)

        actions = "  ".join(
            f"[bold cyan]{escape(action.key)}[/bold cyan] {action.description}" for action in menu.actions
        )
        self.console.print(f"[bold]Actions:[/bold] {actions}  [bold cyan]q[/bold cyan] Back")
        if session is not None:
            preview = " ".join(session.args())
            self.console.print(f"[dim]args: {escape(preview) or '(none)'}[/dim]")

    def ask(self, message: str, choices: Iterable[str]) -> str:
        """Prompt for one key, completing against `choices`."""

        completer = WordCompleter(list(choices), WORD=True)
        with patch_stdout(raw=True):
            return self.prompt_session.prompt(f"{message}> ", completer=completer).strip()

    def ask_value(self, label: str, candidates: Iterable[str]) -> str:
        completer = WordCompleter(list(candidates), WORD=True)
        with patch_stdout(raw=True):
            return self.prompt_session.prompt(f"{label}: ", completer=completer, complete_while_typing=True)

    @staticmethod
    def _flag_text(argument: str, value: str | list[str] | None) -> str:
        if value is None:
            return argument or "<text>"
        text = ",".join(value) if isinstance(value, list) else value
        if argument == "--":
            return f"-- {text}"
        return f"{argument}{text}"

"""Interactive menu loop."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Protocol

from loguru import logger

from cargo_menu.cli.render import Renderer
from cargo_menu.config import Settings
from cargo_menu.core.args import SeparatorPolicy
from cargo_menu.core.commands import assemble_command, parse_command_line
from cargo_menu.core.metadata import MetadataReader, metadata_sources
from cargo_menu.core.types import CandidateSource, ProjectState
from cargo_menu.errors import CargoMenuError
from cargo_menu.menus import COMMAND_MENUS, CUSTOM_COMMAND, CommandMenu, menu_by_key
from cargo_menu.runner import CommandDispatcher
from cargo_menu.session import MenuSession

QUIT_KEYS = frozenset({"q", "quit", "exit"})


class Dispatcher(Protocol):
    async def dispatch(self, subcommand: str, command: str) -> int: ...


class InteractiveMenu:
    """Walks the user from a command to its flags and runs the result."""

    def __init__(
        self,
        settings: Settings,
        *,
        renderer: Renderer | None = None,
        sources: Mapping[str, CandidateSource] | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.settings = settings
        self.state: ProjectState = settings.project_state()
        self.policy: SeparatorPolicy = settings.separator_policy()
        self.renderer = renderer or Renderer()
        if sources is None:
            sources = metadata_sources(MetadataReader(strict=settings.strict_metadata))
        self.sources = sources
        self.dispatcher = dispatcher or CommandDispatcher(
            self.state,
            naming=settings.output_naming,
            console=getattr(self.renderer, "console", None),
        )
        self.last_returncode: int | None = None

    def run(self) -> None:
        self.renderer.welcome(self.state)
        menus = [*COMMAND_MENUS.values(), CUSTOM_COMMAND]
        keys = [menu.key for menu in menus]
        while True:
            self.renderer.command_list(menus)
            try:
                key = self.renderer.ask("cargo", keys)
            except (EOFError, KeyboardInterrupt):
                self.renderer.info("")
                return
            if not key:
                continue
            if key in QUIT_KEYS:
                return
            try:
                menu = menu_by_key(key)
                if menu is CUSTOM_COMMAND:
                    self.run_custom()
                else:
                    self.run_menu(menu)
            except CargoMenuError as exc:
                self.renderer.error(str(exc))

    def run_menu(self, menu: CommandMenu) -> None:
        session = MenuSession(menu, self.state, self.sources)
        action_keys = {action.key for action in menu.actions}
        while True:
            self.renderer.menu(menu, session)
            try:
                key = self.renderer.ask(menu.name, menu.keys())
            except EOFError:
                return
            except KeyboardInterrupt:
                session.reset()
                return
            if not key:
                continue
            if key in QUIT_KEYS:
                return
            try:
                if key in action_keys:
                    subcommand, args = session.invocation(key)
                    self.execute(subcommand, args)
                    return
                self.select(session, key)
            except CargoMenuError as exc:
                self.renderer.error(str(exc))

    def select(self, session: MenuSession, key: str) -> None:
        flag = session.menu.flag(key)
        if not flag.takes_value or session.is_active(key):
            session.toggle(key)
            return
        try:
            value = self.renderer.ask_value(flag.description, session.candidates(key))
        except (EOFError, KeyboardInterrupt):
            return
        session.set_value(key, value)

    def run_custom(self) -> None:
        try:
            line = self.renderer.ask_value("cargo", sorted(COMMAND_MENUS))
        except (EOFError, KeyboardInterrupt):
            return
        if not line.strip():
            return
        subcommand, args = parse_command_line(line)
        self.execute(subcommand, args)

    def execute(self, subcommand: str, args: list[str]) -> int | None:
        command = assemble_command(subcommand, args, cargo_path=self.state.cargo_path, policy=self.policy)
        logger.debug("menu.execute subcommand={} command={}", subcommand, command)
        try:
            self.last_returncode = asyncio.run(self.dispatcher.dispatch(subcommand, command))
        except KeyboardInterrupt:
            self.renderer.error("interrupted")
            self.last_returncode = None
        return self.last_returncode

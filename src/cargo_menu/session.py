"""Selections collected while one command menu is open."""

from __future__ import annotations

from collections.abc import Mapping

from cargo_menu.core.types import CandidateSource, ProjectState
from cargo_menu.errors import UsageError
from cargo_menu.menus import CommandMenu, FlagSpec

SelectionValue = str | list[str] | None


class MenuSession:
    """Tracks toggled flags and their values for one menu traversal.

    Selections keep the order in which they were first made; that order
    becomes the argument order handed to the assembler.
    """

    def __init__(
        self,
        menu: CommandMenu,
        state: ProjectState,
        sources: Mapping[str, CandidateSource] | None = None,
    ) -> None:
        self.menu = menu
        self.state = state
        self._sources = dict(sources or {})
        self._selected: dict[str, SelectionValue] = {}

    def toggle(self, key: str) -> bool:
        """Flip a switch on or off; returns the new state."""

        flag = self.menu.flag(key)
        if flag.takes_value:
            if key in self._selected:
                self.clear(key)
                return False
            raise UsageError(f"{key} ({flag.description}) needs a value")
        if key in self._selected:
            del self._selected[key]
            return False
        self._selected[key] = None
        return True

    def set_value(self, key: str, value: str | list[str]) -> None:
        flag = self.menu.flag(key)
        if not flag.takes_value:
            raise UsageError(f"{key} ({flag.description}) is a switch and takes no value")

        if flag.multi_value and isinstance(value, str):
            value = value.replace(",", " ").split()
        if isinstance(value, list):
            values = [item.strip() for item in value if item.strip()]
            if not flag.multi_value and len(values) > 1:
                raise UsageError(f"{key} ({flag.description}) takes a single value")
            normalized: SelectionValue = values if flag.multi_value else (values[0] if values else "")
        else:
            normalized = value.strip() if flag.is_option else value
        if not normalized:
            self.clear(key)
            return

        self._check_choices(flag, normalized)
        self._selected[key] = normalized

    def clear(self, key: str) -> None:
        self.menu.flag(key)
        self._selected.pop(key, None)

    def reset(self) -> None:
        self._selected.clear()

    def is_active(self, key: str) -> bool:
        return key in self._selected

    def value_of(self, key: str) -> SelectionValue:
        return self._selected.get(key)

    def candidates(self, key: str) -> list[str]:
        """Completion candidates for a value flag; fixed choices win over sources."""

        flag = self.menu.flag(key)
        if flag.choices:
            return list(flag.choices)
        if flag.completion is None:
            return []
        source = self._sources.get(flag.completion)
        if source is None:
            return []
        return source(self.state)

    def args(self) -> list[str]:
        """Selected tokens in selection order, with passthrough text always last."""

        tokens: list[str] = []
        passthrough: list[str] = []
        for key, value in self._selected.items():
            flag = self.menu.flag(key)
            if flag.is_passthrough:
                passthrough.extend(flag.render(value))
            else:
                tokens.extend(flag.render(value))
        return [*tokens, *passthrough]

    def invocation(self, action_key: str) -> tuple[str, list[str]]:
        """Subcommand and arguments for running the menu through `action_key`."""

        action = self.menu.action(action_key)
        return action.subcommand, [*action.extra_args, *self.args()]

    @staticmethod
    def _check_choices(flag: FlagSpec, value: SelectionValue) -> None:
        if not flag.choices:
            return
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item not in flag.choices:
                allowed = ", ".join(flag.choices)
                raise UsageError(f"{flag.key} ({flag.description}) must be one of: {allowed}")

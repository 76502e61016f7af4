"""Command line assembly for cargo invocations."""

from __future__ import annotations

import shlex
from collections.abc import Iterable

from cargo_menu.core.args import SeparatorPolicy
from cargo_menu.errors import UsageError


def parse_command_words(text: str) -> list[str]:
    """Split command text into words using shell rules."""

    try:
        return shlex.split(text)
    except ValueError as exc:
        raise UsageError(f"invalid command syntax: {exc}") from exc


def parse_command_line(text: str) -> tuple[str, list[str]]:
    """Parse free-form `subcommand args...` input, with or without a leading `cargo`."""

    words = parse_command_words(text)
    if words and words[0] == "cargo":
        words = words[1:]
    if not words:
        raise UsageError("missing cargo subcommand")
    return words[0], words[1:]


def assemble_command(
    subcommand: str,
    args: Iterable[str],
    *,
    cargo_path: str = "cargo",
    policy: SeparatorPolicy | None = None,
) -> str:
    """Build `<cargo_path> <subcommand> <args...>` with separator flags in place.

    Arguments are joined with single spaces and never quoted.
    """

    policy = policy or SeparatorPolicy()
    ordered = policy.rearrange(subcommand, args)
    return " ".join([cargo_path, subcommand, *ordered])

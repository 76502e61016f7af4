"""Ordering of cargo arguments around the `--` separator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

SEPARATOR = "--"
DEFAULT_POST_SEPARATOR_FLAGS: frozenset[str] = frozenset({"--nocapture"})

# Flags the test harness or the compiler driver reads after the separator.
BUILTIN_SUBCOMMAND_FLAGS: Mapping[str, frozenset[str]] = {
    "test": frozenset({"--include-ignored", "--ignored", "--show-output", "--test-threads"}),
    "clippy": frozenset({"-Dwarnings", "-Wclippy::pedantic"}),
}


def flag_name(token: str) -> str:
    """Return the flag part of a token, dropping any `=value` suffix."""

    if token.startswith("-") and "=" in token:
        return token.split("=", 1)[0]
    return token


def is_post_separator(token: str, post_flags: Iterable[str] = DEFAULT_POST_SEPARATOR_FLAGS) -> bool:
    """Whether `token` must appear after the separator."""

    flags = frozenset(post_flags)
    return token in flags or flag_name(token) in flags


def rearrange_args(tokens: Iterable[str], post_flags: Iterable[str] = DEFAULT_POST_SEPARATOR_FLAGS) -> list[str]:
    """Move post-separator flags behind a single `--`.

    Relative order inside each partition is kept. Anything that already
    follows an explicit separator is passthrough text and stays after it.
    The separator is only emitted when something needs it, or when the
    input already carried one. Only the first `--` of the input is treated
    as the separator; a later `--` is passthrough text for the program and
    is kept verbatim, so such input yields more than one `--` token.
    """

    flags = frozenset(post_flags)
    pre: list[str] = []
    post: list[str] = []
    passthrough: list[str] = []
    seen_separator = False
    for token in tokens:
        if seen_separator:
            passthrough.append(token)
        elif token == SEPARATOR:
            seen_separator = True
        elif is_post_separator(token, flags):
            post.append(token)
        else:
            pre.append(token)

    if not post and not seen_separator:
        return pre
    return [*pre, SEPARATOR, *post, *passthrough]


@dataclass(frozen=True)
class SeparatorPolicy:
    """Post-separator flags, shared by every subcommand plus per-subcommand extras."""

    default: frozenset[str] = DEFAULT_POST_SEPARATOR_FLAGS
    per_subcommand: Mapping[str, frozenset[str]] = field(default_factory=lambda: dict(BUILTIN_SUBCOMMAND_FLAGS))

    def flags_for(self, subcommand: str) -> frozenset[str]:
        return self.default | self.per_subcommand.get(subcommand, frozenset())

    def rearrange(self, subcommand: str, tokens: Iterable[str]) -> list[str]:
        return rearrange_args(tokens, self.flags_for(subcommand))

    def extended(self, extra: Mapping[str, Iterable[str]]) -> SeparatorPolicy:
        """Return a policy with `extra` flags merged into the per-subcommand sets."""

        merged = {name: frozenset(flags) for name, flags in self.per_subcommand.items()}
        for name, flags in extra.items():
            merged[name] = merged.get(name, frozenset()) | frozenset(flags)
        return SeparatorPolicy(default=self.default, per_subcommand=merged)

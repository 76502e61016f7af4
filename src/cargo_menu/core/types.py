"""Shared core types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectState:
    """Where cargo runs and which executable runs it."""

    root: Path
    cargo_path: str = "cargo"


# Produces completion candidates for one menu field.
CandidateSource = Callable[[ProjectState], list[str]]

"""Completion candidates read from `cargo metadata`."""

from __future__ import annotations

import subprocess
from collections.abc import Callable

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from cargo_menu.core.types import CandidateSource, ProjectState
from cargo_menu.errors import (
    CargoNotFoundError,
    MetadataCommandError,
    MetadataError,
    MetadataParseError,
)

METADATA_ARGS = ("metadata", "--no-deps", "--format-version", "1")


class Target(BaseModel):
    name: str
    kind: list[str] = Field(default_factory=list)


class Package(BaseModel):
    name: str = ""
    targets: list[Target] = Field(default_factory=list)
    features: dict[str, list[str]] = Field(default_factory=dict)


class CargoMetadata(BaseModel):
    """The subset of `cargo metadata --format-version 1` used for completion."""

    packages: list[Package] = Field(default_factory=list)


def fetch_metadata(state: ProjectState) -> CargoMetadata:
    """Run `cargo metadata` in the project root and parse its output."""

    try:
        completed = subprocess.run(  # noqa: S603
            [state.cargo_path, *METADATA_ARGS],
            cwd=state.root,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        raise CargoNotFoundError(f"cannot run {state.cargo_path!r}: {exc.strerror or exc}") from exc
    except OSError as exc:
        raise CargoNotFoundError(f"cannot run {state.cargo_path!r}: {exc}") from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or b"").decode("utf-8", errors="replace")
        raise MetadataCommandError(completed.returncode, stderr)
    return parse_metadata(completed.stdout or b"")


def parse_metadata(output: str | bytes) -> CargoMetadata:
    try:
        text = output.decode("utf-8") if isinstance(output, bytes) else output
    except UnicodeDecodeError as exc:
        raise MetadataParseError(f"metadata output is not UTF-8: {exc.reason}") from exc
    try:
        return CargoMetadata.model_validate_json(text)
    except ValidationError as exc:
        raise MetadataParseError(f"invalid metadata document: {exc.error_count()} error(s)") from exc


def target_names(metadata: CargoMetadata, kind: str) -> list[str]:
    """Names of all targets carrying `kind`, sorted ascending."""

    return sorted(target.name for package in metadata.packages for target in package.targets if kind in target.kind)


def binary_targets(metadata: CargoMetadata) -> list[str]:
    return target_names(metadata, "bin")


def feature_names(metadata: CargoMetadata) -> list[str]:
    return sorted({name for package in metadata.packages for name in package.features})


class MetadataReader:
    """Fetches metadata per request and degrades to no candidates on failure."""

    def __init__(
        self,
        *,
        strict: bool = False,
        fetch: Callable[[ProjectState], CargoMetadata] = fetch_metadata,
    ) -> None:
        self.strict = strict
        self._fetch = fetch

    def read(self, state: ProjectState, kind: str, project: Callable[[CargoMetadata], list[str]]) -> list[str]:
        try:
            metadata = self._fetch(state)
        except MetadataError as exc:
            if self.strict:
                raise
            logger.warning(
                "metadata.fetch.error kind={} reason={} root={} error={}",
                kind,
                type(exc).__name__,
                state.root,
                exc,
            )
            return []
        return project(metadata)

    def binary_targets(self, state: ProjectState) -> list[str]:
        return self.read(state, "bin", binary_targets)

    def feature_names(self, state: ProjectState) -> list[str]:
        return self.read(state, "feature", feature_names)

    def targets_of_kind(self, kind: str) -> CandidateSource:
        def source(state: ProjectState) -> list[str]:
            return self.read(state, kind, lambda metadata: target_names(metadata, kind))

        return source


def metadata_sources(reader: MetadataReader | None = None) -> dict[str, CandidateSource]:
    """Default completion sources keyed by the name menus refer to them with."""

    reader = reader or MetadataReader()
    return {
        "bin": reader.binary_targets,
        "feature": reader.feature_names,
        "example": reader.targets_of_kind("example"),
        "test": reader.targets_of_kind("test"),
        "bench": reader.targets_of_kind("bench"),
    }

"""Core argument handling, assembly and metadata lookups."""

from .args import SEPARATOR, SeparatorPolicy, is_post_separator, rearrange_args
from .commands import assemble_command, parse_command_line
from .metadata import CargoMetadata, MetadataReader, binary_targets, feature_names, metadata_sources
from .types import CandidateSource, ProjectState

__all__ = [
    "SEPARATOR",
    "CandidateSource",
    "CargoMetadata",
    "MetadataReader",
    "ProjectState",
    "SeparatorPolicy",
    "assemble_command",
    "binary_targets",
    "feature_names",
    "is_post_separator",
    "metadata_sources",
    "parse_command_line",
    "rearrange_args",
]

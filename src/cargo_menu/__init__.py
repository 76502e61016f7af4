"""cargo-menu - build and run cargo commands from a keyboard menu."""

from .core import ProjectState, SeparatorPolicy, assemble_command, rearrange_args
from .menus import COMMAND_MENUS

__version__ = "0.1.0"

__all__ = ["COMMAND_MENUS", "ProjectState", "SeparatorPolicy", "assemble_command", "rearrange_args"]

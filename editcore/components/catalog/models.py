"""
Catalog component models.

Command entries, lookup inputs/outputs and the editor error hierarchy.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import SelectionContext

# --- Enums ---


class CommandKind(str, Enum):
    """What a command does, which decides how it is dispatched."""

    INLINE_STYLE = "inline_style"
    ALIGNMENT = "alignment"
    LIST = "list"
    INDENTATION = "indentation"
    BLOCK_FORMAT = "block_format"
    LINK = "link"
    IMAGE = "image"
    COLOR = "color"
    HISTORY = "history"
    CLEAR = "clear"


# (context, surface, command name) -> is the command active at the cursor
ActivePredicate = Callable[[SelectionContext, HostSurfacePort, str], bool]


@dataclass(frozen=True)
class Command:
    """Immutable catalog entry."""

    name: str
    kind: CommandKind
    value_required: bool = False
    label: str = ""
    allowed_values: tuple[str, ...] = ()
    active_when: ActivePredicate | None = field(default=None, compare=False, repr=False)

    @property
    def queryable(self) -> bool:
        return self.active_when is not None


# --- Error Types ---


class EditorError(Exception):
    """Base editor error."""

    pass


class UnknownCommandError(EditorError, KeyError):
    """Command name is not registered in the catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown command: {self.name}"


class InvalidCommandValueError(EditorError, ValueError):
    """Value is not one the command accepts."""

    def __init__(self, name: str, value: str, allowed: tuple[str, ...]) -> None:
        self.name = name
        self.value = value
        self.allowed = allowed
        super().__init__(f"Invalid value {value!r} for {name}; expected one of {', '.join(allowed)}")


class DuplicateCommandError(EditorError, ValueError):
    """Two catalog entries share a name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Command already registered: {name}")


# --- Input Models ---


@dataclass(frozen=True)
class LookupCommandInput:
    """Input for resolving a command by name."""

    name: str


@dataclass(frozen=True)
class ListCommandsInput:
    """Input for listing catalog entries, optionally of one kind."""

    kind: CommandKind | None = None


# --- Output Models ---


@dataclass(frozen=True)
class LookupCommandOutput:
    """Resolved catalog entry."""

    command: Command


@dataclass(frozen=True)
class ListCommandsOutput:
    """Catalog entries in registration order."""

    commands: tuple[Command, ...]
    total: int

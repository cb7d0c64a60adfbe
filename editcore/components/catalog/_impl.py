"""
CommandCatalog - registry of supported formatting commands.

Functional Core - pure data, no host calls except inside predicates.

Invariants:
- Names are unique
- The catalog never changes after construction; extend() returns a new one
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import SelectionContext

from .models import Command, CommandKind, DuplicateCommandError, UnknownCommandError

# --- Active-State Predicates ---


def host_state(context: SelectionContext, surface: HostSurfacePort, name: str) -> bool:
    """Ask the host whether the command's style is on at the cursor."""
    return surface.query_command_state(name)


def inside_link(context: SelectionContext, surface: HostSurfacePort, name: str) -> bool:
    """Link commands are active while the cursor sits in a link."""
    return context.nearest_link_node is not None


# --- Default Commands ---

BLOCK_FORMAT_VALUES: tuple[str, ...] = ("p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")

DEFAULT_COMMANDS: tuple[Command, ...] = (
    # Inline styles
    Command("bold", CommandKind.INLINE_STYLE, label="Bold", active_when=host_state),
    Command("italic", CommandKind.INLINE_STYLE, label="Italic", active_when=host_state),
    Command("underline", CommandKind.INLINE_STYLE, label="Underline", active_when=host_state),
    Command(
        "strikeThrough", CommandKind.INLINE_STYLE, label="Strike Through", active_when=host_state
    ),
    Command("superscript", CommandKind.INLINE_STYLE, label="Superscript", active_when=host_state),
    Command("subscript", CommandKind.INLINE_STYLE, label="Subscript", active_when=host_state),
    # Alignment
    Command("justifyLeft", CommandKind.ALIGNMENT, label="Align Left", active_when=host_state),
    Command("justifyCenter", CommandKind.ALIGNMENT, label="Align Center", active_when=host_state),
    Command("justifyRight", CommandKind.ALIGNMENT, label="Align Right", active_when=host_state),
    # Lists
    Command(
        "insertOrderedList", CommandKind.LIST, label="Numbered List", active_when=host_state
    ),
    Command(
        "insertUnorderedList", CommandKind.LIST, label="Bullet List", active_when=host_state
    ),
    # Indentation (custom transform, not the native command)
    Command("indent", CommandKind.INDENTATION, label="Indent"),
    Command("outdent", CommandKind.INDENTATION, label="Outdent"),
    # Block format
    Command(
        "formatBlock",
        CommandKind.BLOCK_FORMAT,
        value_required=True,
        label="Block Format",
        allowed_values=BLOCK_FORMAT_VALUES,
    ),
    # Links and images
    Command(
        "createLink", CommandKind.LINK, value_required=True, label="Link", active_when=inside_link
    ),
    Command("unlink", CommandKind.LINK, label="Remove Link"),
    Command("insertImage", CommandKind.IMAGE, value_required=True, label="Image"),
    # Color
    Command("foreColor", CommandKind.COLOR, value_required=True, label="Text Color"),
    Command("hiliteColor", CommandKind.COLOR, value_required=True, label="Highlight"),
    # History
    Command("undo", CommandKind.HISTORY, label="Undo"),
    Command("redo", CommandKind.HISTORY, label="Redo"),
    # Clear
    Command("clearFormat", CommandKind.CLEAR, label="Clear Formatting"),
)


# --- Catalog ---


class CommandCatalog:
    """
    Read-only command registry.

    Lookup is by unique name; iteration follows registration order.
    """

    def __init__(self, commands: Iterable[Command]) -> None:
        entries: dict[str, Command] = {}
        for command in commands:
            if command.name in entries:
                raise DuplicateCommandError(command.name)
            entries[command.name] = command
        self._entries = MappingProxyType(entries)

    def lookup(self, name: str) -> Command:
        """
        Resolve a command by name.

        Raises:
            UnknownCommandError: If the name is not registered.
        """
        command = self._entries.get(name)
        if command is None:
            raise UnknownCommandError(name)
        return command

    def extend(self, commands: Iterable[Command]) -> CommandCatalog:
        """Return a new catalog with extra entries registered."""
        return CommandCatalog([*self._entries.values(), *commands])

    def of_kind(self, kind: CommandKind) -> tuple[Command, ...]:
        return tuple(c for c in self._entries.values() if c.kind == kind)

    def queryable(self) -> tuple[Command, ...]:
        return tuple(c for c in self._entries.values() if c.queryable)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[Command]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def build_default_catalog() -> CommandCatalog:
    """Catalog with every built-in command."""
    return CommandCatalog(DEFAULT_COMMANDS)


DEFAULT_CATALOG = build_default_catalog()

"""
Dispatch component - Command Dispatcher.

Resolves a command name against the catalog, picks the mutation from the
command's kind and the selection's tags, applies it, and hands back a fresh
snapshot for the UI.

Branch order:
1. Unknown name -> UnknownCommandError (nothing mutated)
2. Alignment over an image -> image alignment transform
3. Indentation -> margin transform on the containing block
4. Link -> normalized createLink with metadata, or native unlink
5. Image / History -> links and history components
6. Anything else -> native host command (Clear maps to removeFormat)

After every branch: focus the surface, recapture selection, active set
and history.
"""

from __future__ import annotations

import logging

from editcore.components.active_state import capture_snapshot
from editcore.components.catalog import DEFAULT_CATALOG, CommandCatalog, CommandKind
from editcore.components.history import run_redo, run_undo
from editcore.components.links import (
    InsertImageInput,
    InsertLinkInput,
    run_insert_image,
    run_insert_link,
)
from editcore.components.selection import run_capture
from editcore.core.ports.surface import HostSurfacePort
from editcore.rules.models import DEFAULT_RULES, EditorRules

from ._impl import align_image, check_value, shift_indent
from .models import DispatchBranch, DispatchInput, DispatchOutput

logger = logging.getLogger(__name__)

NATIVE_ALIASES: dict[str, str] = {
    "clearFormat": "removeFormat",
}


def run_dispatch(
    inp: DispatchInput,
    surface: HostSurfacePort,
    catalog: CommandCatalog = DEFAULT_CATALOG,
    rules: EditorRules = DEFAULT_RULES,
) -> DispatchOutput:
    """
    Dispatch one catalog command against the host surface.

    Args:
        inp: Command name, optional value and optional selection context.
        surface: Host surface to mutate.
        catalog: Command registry.
        rules: Editor rules (indent step, image alignment styles, links).

    Returns:
        DispatchOutput with the branch taken and the new snapshot.

    Raises:
        UnknownCommandError: If the command is not registered.
        InvalidCommandValueError: If the value is outside the allowed set.
    """
    command = catalog.lookup(inp.command)
    check_value(command, inp.value)
    context = inp.context if inp.context is not None else run_capture(surface)

    branch = DispatchBranch.NATIVE
    applied = False

    if command.value_required and not inp.value:
        branch = DispatchBranch.CANCELLED
    elif context.contains_image and command.kind == CommandKind.ALIGNMENT:
        branch = DispatchBranch.IMAGE_ALIGNMENT
        applied = align_image(surface, context.image_node, command.name, rules)
    elif command.kind == CommandKind.INDENTATION:
        branch = DispatchBranch.INDENTATION
        applied = shift_indent(surface, context.block_node, command.name, rules)
    elif command.kind == CommandKind.LINK:
        branch = DispatchBranch.LINK
        if command.name == "createLink":
            applied = run_insert_link(InsertLinkInput(inp.value), surface, rules).inserted
        else:
            applied = surface.exec_command(command.name)
    elif command.kind == CommandKind.IMAGE:
        branch = DispatchBranch.IMAGE
        applied = run_insert_image(InsertImageInput(inp.value), surface).inserted
    elif command.kind == CommandKind.HISTORY:
        branch = DispatchBranch.HISTORY
        before = surface.can_undo() if command.name == "undo" else surface.can_redo()
        if command.name == "undo":
            run_undo(surface)
        else:
            run_redo(surface)
        applied = before
    else:
        applied = surface.exec_command(NATIVE_ALIASES.get(command.name, command.name), inp.value)

    logger.debug(
        "dispatch %s value=%r branch=%s applied=%s",
        command.name,
        inp.value,
        branch.value,
        applied,
    )

    surface.focus()
    return DispatchOutput(
        command=command.name,
        branch=branch,
        applied=applied,
        snapshot=capture_snapshot(surface, catalog),
    )

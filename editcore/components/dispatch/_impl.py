"""
Command Dispatcher transforms.

The two mutations the host has no native primitive for:

- Image alignment: the same toolbar action that aligns text floats or
  centers an image when the selection holds one. Styles come from the
  rules (display, float, margin per direction).
- Indentation: a direct margin-left change on the containing block in
  fixed steps, clamped at the minimum, so non-list content indents too.

Both are single set_styles calls, so each is one undo step, and both are
silent no-ops without a target.
"""

from __future__ import annotations

import logging
import re

from editcore.components.catalog import Command, InvalidCommandValueError
from editcore.core.ports.surface import HostSurfacePort
from editcore.rules.models import EditorRules

logger = logging.getLogger(__name__)

ALIGN_DIRECTIONS: dict[str, str] = {
    "justifyLeft": "left",
    "justifyCenter": "center",
    "justifyRight": "right",
}

INDENT_DIRECTIONS: dict[str, int] = {
    "indent": 1,
    "outdent": -1,
}

MARGIN_PROPERTY = "margin-left"

_LENGTH = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-z%]*)\s*$", re.IGNORECASE)


def parse_length(value: str | None) -> tuple[float, str] | None:
    """
    Split a CSS length into amount and unit.

    '10.5px' -> (10.5, 'px'), '1.5em' -> (1.5, 'em'). Missing values and
    bare numbers are px. Returns None for anything else (auto, calc()).
    """
    if not value:
        return 0.0, "px"
    match = _LENGTH.match(value)
    if match is None:
        return None
    return float(match.group(1)), match.group(2).lower() or "px"


def check_value(command: Command, value: str | None) -> None:
    """
    Reject values outside a command's allowed set.

    Raises:
        InvalidCommandValueError: If the command restricts values and
            value is not one of them.
    """
    if not command.allowed_values or not value:
        return
    normalized = value.strip().strip("<>").lower()
    if normalized not in command.allowed_values:
        raise InvalidCommandValueError(command.name, value, command.allowed_values)


def align_image(
    surface: HostSurfacePort,
    image_node: str | None,
    command_name: str,
    rules: EditorRules,
) -> bool:
    """Float or center the image; never touches text styles."""
    direction = ALIGN_DIRECTIONS.get(command_name)
    if image_node is None or direction is None:
        logger.debug("Image alignment skipped: no image target")
        return False
    surface.set_styles(image_node, rules.image_alignment.for_direction(direction))
    return True


def shift_indent(
    surface: HostSurfacePort,
    block_node: str | None,
    command_name: str,
    rules: EditorRules,
) -> bool:
    """
    Add or remove one indentation step on the containing block.

    Only px margins are stepped. A margin in any other unit is left as
    it is, so indent followed by outdent always restores the block.

    Returns:
        True if the margin changed.
    """
    if block_node is None:
        logger.debug("%s skipped: no containing block", command_name)
        return False

    margin = surface.get_style(block_node, MARGIN_PROPERTY)
    length = parse_length(margin)
    if length is None or length[1] != "px":
        logger.debug("%s skipped: margin %r is not in px", command_name, margin)
        return False

    current = length[0]
    step = rules.indentation.step_px * INDENT_DIRECTIONS[command_name]
    updated = max(float(rules.indentation.min_px), current + step)
    if updated == current:
        return False

    # Zero margin is stored as no margin.
    surface.set_styles(block_node, {MARGIN_PROPERTY: f"{updated:g}px" if updated else None})
    return True

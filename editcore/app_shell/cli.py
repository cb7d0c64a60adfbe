"""
editcore command line.

    editcore-cli commands
    editcore-cli replay script.yaml [--rules rules.yaml]

A replay script is YAML:

    markup: "<p>Hello world</p>"     # optional, defaults to the reset template
    steps:
      - select: world                # select the first match
      - command: bold
      - cursor: Hello                # caret at the first match
      - command: formatBlock
        value: h2
      - link: example.com
      - image: /logo.png
      - undo: true
      - redo: true
      - reset: true
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from editcore.adapters.memory_surface import InMemorySurface
from editcore.components.active_state import capture_snapshot
from editcore.components.catalog import DEFAULT_CATALOG, EditorError, ListCommandsInput, run_list
from editcore.components.dispatch import DispatchInput, run_dispatch
from editcore.components.document import ResetDocumentInput, run_reset
from editcore.components.history import run_redo, run_undo
from editcore.components.links import (
    InsertImageInput,
    InsertLinkInput,
    run_insert_image,
    run_insert_link,
)
from editcore.core.ports.surface import SurfaceError
from editcore.domain.entities import EditorSnapshot
from editcore.rules.loader import load_rules
from editcore.rules.models import DEFAULT_RULES, EditorRules

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


class ScriptError(Exception):
    """Replay script is malformed."""

    pass


def get_rules(path: str | None) -> EditorRules:
    rules_path = Path(path or RULES_PATH)
    if rules_path.exists():
        return load_rules(rules_path)
    if path:
        logger.error(f"Rules file {rules_path} not found.")
        sys.exit(1)
    return DEFAULT_RULES


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def apply_step(step: dict[str, Any], surface: InMemorySurface, rules: EditorRules) -> None:
    """Apply one replay step to the surface."""
    if "select" in step:
        surface.select_matching(str(step["select"]))
    elif "cursor" in step:
        surface.cursor_in(str(step["cursor"]))
    elif "select_all" in step:
        surface.select_all()
    elif "type" in step:
        surface.type_text(str(step["type"]))
    elif "command" in step:
        value = step.get("value")
        run_dispatch(
            DispatchInput(str(step["command"]), None if value is None else str(value)),
            surface,
            DEFAULT_CATALOG,
            rules,
        )
    elif "link" in step:
        run_insert_link(InsertLinkInput(_text(step["link"])), surface, rules)
    elif "image" in step:
        run_insert_image(InsertImageInput(_text(step["image"])), surface)
    elif "undo" in step:
        run_undo(surface)
    elif "redo" in step:
        run_redo(surface)
    elif "reset" in step:
        run_reset(ResetDocumentInput(), surface, DEFAULT_CATALOG, rules)
    else:
        raise ScriptError(f"Unknown step: {step}")


def parse_script(text: str) -> dict[str, Any]:
    """Parse replay script YAML; an empty file is an empty script."""
    try:
        script = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ScriptError(f"Invalid YAML: {e}") from e
    if script is None:
        return {}
    if not isinstance(script, dict):
        raise ScriptError("Script must be a mapping with 'markup' and 'steps'")
    return script


def replay(script: dict[str, Any], rules: EditorRules) -> tuple[str, EditorSnapshot]:
    """Run a parsed script; returns final markup and snapshot."""
    if not isinstance(script, dict):
        raise ScriptError("Script must be a mapping with 'markup' and 'steps'")
    markup = _text(script.get("markup", rules.document.reset_template))
    surface = InMemorySurface(markup, history_limit=rules.history.limit)

    steps = script.get("steps") or []
    if not isinstance(steps, list):
        raise ScriptError("'steps' must be a list")
    for number, step in enumerate(steps, start=1):
        if not isinstance(step, dict):
            raise ScriptError(f"Step {number} must be a mapping")
        logger.debug("step %d: %s", number, step)
        apply_step(step, surface, rules)

    return surface.get_content(), capture_snapshot(surface, DEFAULT_CATALOG)


def handle_replay(args: argparse.Namespace) -> None:
    rules = get_rules(args.rules)
    script_path = Path(args.script)
    if not script_path.exists():
        logger.error(f"Script {script_path} not found.")
        sys.exit(1)

    try:
        content, snapshot = replay(parse_script(script_path.read_text()), rules)
    except (ScriptError, EditorError, SurfaceError) as e:
        logger.error(f"Replay failed: {e}")
        sys.exit(1)

    print(content)
    print(f"active: {', '.join(snapshot.active.as_list()) or '-'}")
    print(f"undo: {snapshot.history.can_undo}  redo: {snapshot.history.can_redo}")


def handle_commands(args: argparse.Namespace) -> None:
    for command in run_list(ListCommandsInput()).commands:
        value = " <value>" if command.value_required else ""
        print(f"{command.name}{value}\t{command.kind.value}\t{command.label}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="editcore CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # replay
    replay_parser = subparsers.add_parser("replay", help="Replay a command script")
    replay_parser.add_argument("script", help="Path to a YAML replay script")
    replay_parser.add_argument("--rules", help="Path to rules.yaml")

    # commands
    subparsers.add_parser("commands", help="List supported commands")

    args = parser.parse_args()

    if args.command == "replay":
        handle_replay(args)
    elif args.command == "commands":
        handle_commands(args)


if __name__ == "__main__":
    main()

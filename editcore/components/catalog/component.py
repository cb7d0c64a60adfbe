"""
Catalog component - Command registry lookups.

Shell Layer - thin entry points over CommandCatalog.
"""

from __future__ import annotations

from ._impl import DEFAULT_CATALOG, CommandCatalog
from .models import (
    ListCommandsInput,
    ListCommandsOutput,
    LookupCommandInput,
    LookupCommandOutput,
)


def run_lookup(
    inp: LookupCommandInput,
    catalog: CommandCatalog = DEFAULT_CATALOG,
) -> LookupCommandOutput:
    """
    Resolve a command by name.

    Raises:
        UnknownCommandError: If the name is not registered.
    """
    return LookupCommandOutput(command=catalog.lookup(inp.name))


def run_list(
    inp: ListCommandsInput,
    catalog: CommandCatalog = DEFAULT_CATALOG,
) -> ListCommandsOutput:
    """List catalog entries, optionally filtered by kind."""
    commands = catalog.of_kind(inp.kind) if inp.kind is not None else tuple(catalog)
    return ListCommandsOutput(commands=commands, total=len(commands))

"""
Catalog component - Registry of supported formatting commands.
"""

from ._impl import (
    BLOCK_FORMAT_VALUES,
    DEFAULT_CATALOG,
    DEFAULT_COMMANDS,
    CommandCatalog,
    build_default_catalog,
    host_state,
    inside_link,
)
from .component import run_list, run_lookup
from .models import (
    ActivePredicate,
    Command,
    CommandKind,
    DuplicateCommandError,
    EditorError,
    InvalidCommandValueError,
    ListCommandsInput,
    ListCommandsOutput,
    LookupCommandInput,
    LookupCommandOutput,
    UnknownCommandError,
)

__all__ = [
    # Entry points
    "run_lookup",
    "run_list",
    # Input models
    "LookupCommandInput",
    "ListCommandsInput",
    # Output models
    "LookupCommandOutput",
    "ListCommandsOutput",
    # Catalog
    "ActivePredicate",
    "Command",
    "CommandCatalog",
    "CommandKind",
    "BLOCK_FORMAT_VALUES",
    "DEFAULT_CATALOG",
    "DEFAULT_COMMANDS",
    "build_default_catalog",
    "host_state",
    "inside_link",
    # Errors
    "EditorError",
    "UnknownCommandError",
    "InvalidCommandValueError",
    "DuplicateCommandError",
]

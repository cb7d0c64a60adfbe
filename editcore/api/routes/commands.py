"""Command catalog routes."""

from fastapi import APIRouter, Depends

from editcore.api.deps import get_catalog
from editcore.api.schemas import CommandInfo, CommandListResponse
from editcore.components.catalog import CommandCatalog, ListCommandsInput, run_list

router = APIRouter()


@router.get("/commands", response_model=CommandListResponse)
def list_commands(catalog: CommandCatalog = Depends(get_catalog)) -> CommandListResponse:
    """List every registered command."""
    result = run_list(ListCommandsInput(), catalog)
    return CommandListResponse(
        items=[
            CommandInfo(
                name=command.name,
                kind=command.kind.value,
                label=command.label,
                value_required=command.value_required,
                allowed_values=list(command.allowed_values),
                queryable=command.queryable,
            )
            for command in result.commands
        ],
        total=result.total,
    )

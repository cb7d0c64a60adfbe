from typing import Literal

from pydantic import BaseModel

from editcore.domain.entities import EditorSnapshot, HistoryAvailability, SelectionContext

# --- Requests ---


class CreateSessionRequest(BaseModel):
    markup: str | None = None


class SelectionRequest(BaseModel):
    mode: Literal["cursor", "text", "node", "all", "match"]
    node_id: str | None = None
    offset: int = 0
    start: int = 0
    end: int = 0
    end_node_id: str | None = None
    text: str | None = None


class CommandRequest(BaseModel):
    value: str | None = None


class ValueRequest(BaseModel):
    value: str | None = None


class ResetRequest(BaseModel):
    template: str | None = None


# --- Responses ---


class StateResponse(BaseModel):
    session_id: str
    content: str
    context: SelectionContext
    active: list[str]
    history: HistoryAvailability


class DispatchResponse(StateResponse):
    command: str
    branch: str
    applied: bool


class CommandInfo(BaseModel):
    name: str
    kind: str
    label: str
    value_required: bool
    allowed_values: list[str]
    queryable: bool


class CommandListResponse(BaseModel):
    items: list[CommandInfo]
    total: int


def state_response(session_id: str, content: str, snapshot: EditorSnapshot) -> StateResponse:
    return StateResponse(
        session_id=session_id,
        content=content,
        context=snapshot.context,
        active=snapshot.active.as_list(),
        history=snapshot.history,
    )

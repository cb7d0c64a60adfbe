"""Editing session routes: selection, commands, links, images, history, reset."""

from fastapi import APIRouter, Depends, HTTPException, Response

from editcore.adapters.session_store import EditorSession, InMemoryEditorSessionStore
from editcore.api.deps import get_catalog, get_rules, get_session, get_session_store
from editcore.api.schemas import (
    CommandRequest,
    CreateSessionRequest,
    DispatchResponse,
    ResetRequest,
    SelectionRequest,
    StateResponse,
    ValueRequest,
    state_response,
)
from editcore.components.active_state import capture_snapshot
from editcore.components.catalog import CommandCatalog
from editcore.components.dispatch import DispatchInput, run_dispatch
from editcore.components.document import ResetDocumentInput, run_reset
from editcore.components.history import run_redo, run_undo
from editcore.components.links import (
    InsertImageInput,
    InsertLinkInput,
    run_insert_image,
    run_insert_link,
)
from editcore.rules.models import EditorRules

router = APIRouter()


def _state(session: EditorSession, catalog: CommandCatalog) -> StateResponse:
    surface = session.surface
    return state_response(session.session_id, surface.get_content(), capture_snapshot(surface, catalog))


# --- Routes ---


@router.post("/sessions", response_model=StateResponse, status_code=201)
def create_session(
    data: CreateSessionRequest | None = None,
    store: InMemoryEditorSessionStore = Depends(get_session_store),
    rules: EditorRules = Depends(get_rules),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Create a session seeded with markup, or the reset template."""
    markup = data.markup if data is not None and data.markup is not None else None
    session = store.create(markup if markup is not None else rules.document.reset_template)
    return _state(session, catalog)


@router.get("/sessions/{session_id}", response_model=StateResponse)
def get_state(
    session: EditorSession = Depends(get_session),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Current content, active states and history."""
    with session.lock:
        return _state(session, catalog)


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str,
    store: InMemoryEditorSessionStore = Depends(get_session_store),
) -> Response:
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return Response(status_code=204)


@router.post("/sessions/{session_id}/selection", response_model=StateResponse)
def set_selection(
    data: SelectionRequest,
    session: EditorSession = Depends(get_session),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Move the cursor or select; active states follow the new position."""
    surface = session.surface
    with session.lock:
        if data.mode == "all":
            surface.select_all()
        elif data.mode == "match":
            if not data.text:
                raise HTTPException(status_code=422, detail="'text' is required for mode 'match'")
            surface.select_matching(data.text)
        else:
            if not data.node_id:
                raise HTTPException(
                    status_code=422, detail=f"'node_id' is required for mode '{data.mode}'"
                )
            if data.mode == "cursor":
                surface.place_cursor(data.node_id, data.offset)
            elif data.mode == "text":
                surface.select_text(data.node_id, data.start, data.end, data.end_node_id)
            else:
                surface.select_node(data.node_id)
        return _state(session, catalog)


@router.post("/sessions/{session_id}/commands/{command}", response_model=DispatchResponse)
def dispatch_command(
    command: str,
    data: CommandRequest | None = None,
    session: EditorSession = Depends(get_session),
    rules: EditorRules = Depends(get_rules),
    catalog: CommandCatalog = Depends(get_catalog),
) -> DispatchResponse:
    """Dispatch a catalog command at the current selection."""
    value = data.value if data is not None else None
    with session.lock:
        result = run_dispatch(DispatchInput(command, value), session.surface, catalog, rules)
        state = state_response(session.session_id, session.surface.get_content(), result.snapshot)
    return DispatchResponse(
        **state.model_dump(),
        command=result.command,
        branch=result.branch.value,
        applied=result.applied,
    )


@router.post("/sessions/{session_id}/links", response_model=StateResponse)
def insert_link(
    data: ValueRequest,
    session: EditorSession = Depends(get_session),
    rules: EditorRules = Depends(get_rules),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Insert a link; an empty value is a cancelled prompt."""
    with session.lock:
        run_insert_link(InsertLinkInput(data.value), session.surface, rules)
        session.surface.focus()
        return _state(session, catalog)


@router.post("/sessions/{session_id}/images", response_model=StateResponse)
def insert_image(
    data: ValueRequest,
    session: EditorSession = Depends(get_session),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Insert an image; an empty value is a cancelled prompt."""
    with session.lock:
        run_insert_image(InsertImageInput(data.value), session.surface)
        session.surface.focus()
        return _state(session, catalog)


@router.post("/sessions/{session_id}/undo", response_model=StateResponse)
def undo(
    session: EditorSession = Depends(get_session),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    with session.lock:
        run_undo(session.surface)
        return _state(session, catalog)


@router.post("/sessions/{session_id}/redo", response_model=StateResponse)
def redo(
    session: EditorSession = Depends(get_session),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    with session.lock:
        run_redo(session.surface)
        return _state(session, catalog)


@router.post("/sessions/{session_id}/reset", response_model=StateResponse)
def reset(
    data: ResetRequest | None = None,
    session: EditorSession = Depends(get_session),
    rules: EditorRules = Depends(get_rules),
    catalog: CommandCatalog = Depends(get_catalog),
) -> StateResponse:
    """Replace the content with the template."""
    template = data.template if data is not None else None
    with session.lock:
        snapshot = run_reset(ResetDocumentInput(template), session.surface, catalog, rules)
        return state_response(session.session_id, session.surface.get_content(), snapshot)

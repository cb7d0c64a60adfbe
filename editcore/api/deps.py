import logging
import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, HTTPException, status

from editcore.adapters.session_store import EditorSession, InMemoryEditorSessionStore
from editcore.components.catalog import DEFAULT_CATALOG, CommandCatalog
from editcore.rules.loader import load_rules
from editcore.rules.models import DEFAULT_RULES, EditorRules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("EDITCORE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> EditorRules:
    settings = get_settings()
    if not settings.rules_path.exists():
        logger.warning("No rules file at %s; using defaults", settings.rules_path)
        return DEFAULT_RULES
    return load_rules(settings.rules_path)


def get_catalog() -> CommandCatalog:
    return DEFAULT_CATALOG


# --- Sessions ---
@lru_cache
def get_session_store() -> InMemoryEditorSessionStore:
    rules = get_rules()
    return InMemoryEditorSessionStore(
        ttl=timedelta(minutes=rules.api.session_ttl_minutes),
        max_sessions=rules.api.max_sessions,
        history_limit=rules.history.limit,
    )


def get_session(
    session_id: str,
    store: InMemoryEditorSessionStore = Depends(get_session_store),
) -> EditorSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return session

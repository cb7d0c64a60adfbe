"""
History component - History Gate.

Polls the host for undo/redo availability and forwards undo/redo requests.
It never tracks history itself, so the booleans cannot drift from what the
host would actually do.
"""

from __future__ import annotations

import logging

from editcore.domain.entities import HistoryAvailability

from .ports import HistoryHostPort

logger = logging.getLogger(__name__)


def refresh(host: HistoryHostPort) -> HistoryAvailability:
    """Poll the host; called after every dispatch."""
    return HistoryAvailability(can_undo=host.can_undo(), can_redo=host.can_redo())


def run_undo(host: HistoryHostPort) -> HistoryAvailability:
    """Ask the host to undo, then refresh. No-op when nothing to undo."""
    if host.can_undo():
        host.undo()
    else:
        logger.debug("Undo requested with empty history")
    return refresh(host)


def run_redo(host: HistoryHostPort) -> HistoryAvailability:
    """Ask the host to redo, then refresh. No-op when nothing to redo."""
    if host.can_redo():
        host.redo()
    else:
        logger.debug("Redo requested with empty redo stack")
    return refresh(host)

"""
Active state component - What the toolbar should highlight.

Shell Layer - combines the selection provider, the inference engine and
the history gate into the snapshot handed to the UI after each event.
"""

from __future__ import annotations

from editcore.components.catalog import DEFAULT_CATALOG, CommandCatalog
from editcore.components.history import refresh
from editcore.components.selection import run_capture
from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import ActiveStateSet, EditorSnapshot

from ._impl import compute_active_states
from .models import ComputeActiveStatesInput


def run_compute(
    inp: ComputeActiveStatesInput,
    surface: HostSurfacePort,
    catalog: CommandCatalog = DEFAULT_CATALOG,
) -> ActiveStateSet:
    """Active set for a given context, or for a fresh one when none is given."""
    context = inp.context if inp.context is not None else run_capture(surface)
    return compute_active_states(context, surface, catalog)


def capture_snapshot(
    surface: HostSurfacePort,
    catalog: CommandCatalog = DEFAULT_CATALOG,
) -> EditorSnapshot:
    """
    Fresh context, active set and history for the current cursor.

    Used after every dispatch and on plain cursor movement.
    """
    context = run_capture(surface)
    return EditorSnapshot(
        context=context,
        active=compute_active_states(context, surface, catalog),
        history=refresh(surface),
    )

"""
Document component - Reset to the default template.

The only operation that discards content wholesale instead of targeting
the selection.
"""

from __future__ import annotations

import logging

from editcore.components.active_state import capture_snapshot
from editcore.components.catalog import DEFAULT_CATALOG, CommandCatalog
from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import EditorSnapshot
from editcore.rules.models import DEFAULT_RULES, EditorRules

from .models import ResetDocumentInput

logger = logging.getLogger(__name__)


def run_reset(
    inp: ResetDocumentInput,
    surface: HostSurfacePort,
    catalog: CommandCatalog = DEFAULT_CATALOG,
    rules: EditorRules = DEFAULT_RULES,
) -> EditorSnapshot:
    """
    Replace all content with the template, then recompute state.

    Uses inp.template when given, else the rules' reset template.
    """
    template = inp.template if inp.template is not None else rules.document.reset_template
    surface.replace_content(template)
    logger.debug("Document reset (%d chars of markup)", len(template))
    return capture_snapshot(surface, catalog)

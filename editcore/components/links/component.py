"""
Links component - Link and image insertion with traceable metadata.

Shell Layer - drives the host surface.

Key behaviors:
- Links: normalize, create, then find the enclosing anchor from a fresh
  selection and attach LinkMetadata to it
- Images: the value is inserted as-is, no scheme normalization
- Empty input is a cancelled prompt: no mutation, nothing reported
"""

from __future__ import annotations

import logging

from editcore.components.selection import run_capture
from editcore.core.ports.surface import HostSurfacePort
from editcore.domain.entities import LINK_METADATA_KEY, LinkMetadata
from editcore.rules.models import DEFAULT_RULES, EditorRules

from ._impl import normalize_url
from .models import InsertImageInput, InsertLinkInput, LinkOperationOutput

logger = logging.getLogger(__name__)


def run_insert_link(
    inp: InsertLinkInput,
    surface: HostSurfacePort,
    rules: EditorRules = DEFAULT_RULES,
) -> LinkOperationOutput:
    """
    Create a link at the current selection and tag it with its origin URL.

    A link whose anchor cannot be located afterwards still exists; it just
    carries no metadata.
    """
    url = normalize_url(inp.value, rules.links)
    if url is None:
        logger.debug("Link insertion cancelled (empty value)")
        return LinkOperationOutput(inserted=False)

    if not surface.exec_command("createLink", url):
        logger.debug("Host rejected createLink for %s", url)
        return LinkOperationOutput(inserted=False, url=url)

    anchor_id = run_capture(surface).nearest_link_node
    if anchor_id is None:
        logger.debug("No anchor found after createLink; metadata skipped")
        return LinkOperationOutput(inserted=True, url=url)

    surface.set_metadata(anchor_id, LINK_METADATA_KEY, LinkMetadata(url=url).model_dump())
    return LinkOperationOutput(inserted=True, url=url, node_id=anchor_id, metadata_attached=True)


def run_insert_image(
    inp: InsertImageInput,
    surface: HostSurfacePort,
) -> LinkOperationOutput:
    """Insert an image whose source is the raw value."""
    if not inp.value:
        logger.debug("Image insertion cancelled (empty value)")
        return LinkOperationOutput(inserted=False)

    inserted = surface.exec_command("insertImage", inp.value)
    return LinkOperationOutput(inserted=inserted, url=inp.value)


def read_link_metadata(surface: HostSurfacePort, node_id: str) -> LinkMetadata | None:
    """The URL an anchor was created with, if it was created by run_insert_link."""
    data = surface.get_metadata(node_id, LINK_METADATA_KEY)
    return LinkMetadata.model_validate(data) if data is not None else None

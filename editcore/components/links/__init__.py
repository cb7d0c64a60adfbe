"""
Links component - Link/Image Metadata Manager.
"""

from ._impl import normalize_url
from .component import read_link_metadata, run_insert_image, run_insert_link
from .models import InsertImageInput, InsertLinkInput, LinkOperationOutput

__all__ = [
    # Entry points
    "run_insert_link",
    "run_insert_image",
    "read_link_metadata",
    # Input models
    "InsertLinkInput",
    "InsertImageInput",
    # Output models
    "LinkOperationOutput",
    # Core
    "normalize_url",
]

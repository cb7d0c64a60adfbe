"""
Link/Image Metadata Manager - URL normalization.

Functional Core - pure business logic.
"""

from __future__ import annotations

from editcore.rules.models import LinkRules

DEFAULT_LINK_RULES = LinkRules()


def normalize_url(raw: str | None, rules: LinkRules = DEFAULT_LINK_RULES) -> str | None:
    """
    Make a user-supplied link target absolute.

    Returns:
        The URL, prefixed with the default scheme when it has no accepted
        one (checked case-insensitively); None when the input is empty,
        which means the user cancelled.
    """
    if not raw or not raw.strip():
        return None
    url = raw.strip()
    if url.lower().startswith(tuple(s.lower() for s in rules.accepted_schemes)):
        return url
    return f"{rules.default_scheme}{url}"

"""
Link resolution - map a reference link to document and source endpoints
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from .models import ResolvedEndpoints


# Matches repository paths such as /abs/2301.00001, /pdf/2301.00001v2.pdf,
# /src/2301.00001 and /e-print/hep-th/9901001.
ITEM_PATH_PATTERN = re.compile(
    r"/(?:abs|pdf|src|e-print)/(?P<id>[^\s?#]+?)(?:\.pdf)?$",
)


def _split_link(link: str) -> Optional[tuple[str, str]]:
    value = (link or "").strip()
    if not value or any(ch.isspace() for ch in value):
        return None

    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None

    match = ITEM_PATH_PATTERN.search(parts.path)
    if not match:
        return None
    return parts.netloc, match.group("id")


def extract_item_id(link: str) -> Optional[str]:
    """Return the repository item id for a recognised link, else None"""
    split = _split_link(link)
    return split[1] if split else None


def resolve_links(link: str) -> ResolvedEndpoints:
    """
    Derive the document and source-archive endpoints for a reference link

    Args:
        link: Raw reference URL (abstract page, PDF link, or anything else)

    Returns:
        ResolvedEndpoints. Unrecognised links are returned unchanged as the
        primary endpoint with no archive endpoint.
    """
    split = _split_link(link)
    if split is None:
        return ResolvedEndpoints(primary=(link or "").strip())

    host, item_id = split
    return ResolvedEndpoints(
        primary=f"https://{host}/pdf/{item_id}",
        archive=f"https://{host}/e-print/{item_id}",
    )

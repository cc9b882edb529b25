"""URL normalizer utilities.

Functions to clean URLs, remove tracking params and turn absolute links
into site-relative paths.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import ParseResult, parse_qsl, urlencode, urljoin, urlparse, urlunparse

DEFAULT_REMOVE_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
}


def normalize_url(
    url: str, remove_params: Iterable[str] | None = None, strip_fragment: bool = True
) -> str:
    """Return a normalized URL: cleaned query and optional fragment removal.

    Only common tracking params are removed; empty query strings are dropped.
    """
    remove = set(remove_params or DEFAULT_REMOVE_PARAMS)
    p: ParseResult = urlparse(url)
    q = [
        (k, v) for k, v in parse_qsl(p.query, keep_blank_values=True) if k not in remove
    ]
    query = urlencode(q, doseq=True)
    fragment = "" if strip_fragment else p.fragment
    cleaned = urlunparse(
        (p.scheme, p.netloc, p.path or "", p.params or "", query or "", fragment or "")
    )
    return cleaned


def relative_path(url: str, site: str) -> str:
    """Strip ``site`` from an absolute link so it can be stored as a path.

    Links to other hosts are returned normalized but untouched.
    """
    if not url:
        return ""
    full = normalize_url(urljoin(site.rstrip("/") + "/", url))
    base = site.rstrip("/")
    if full.startswith(base):
        return full[len(base):] or "/"
    return full

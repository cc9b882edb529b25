"""Regex clean-ups applied to chapter HTML before it is stored."""

from __future__ import annotations

import re

_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_SRCSET_RE = re.compile(r'srcset="([^"]+)"')


def strip_scripts(html: str) -> str:
    return _SCRIPT_RE.sub("", html)


def strip_blocks(html: str, pattern: str) -> str:
    """Remove every match of ``pattern`` (case-insensitive, multiline)."""
    return re.sub(pattern, "", html, flags=re.IGNORECASE | re.MULTILINE)


def pick_srcset(html: str) -> str:
    """Replace ``srcset="..."`` with ``src="<last absolute url>"``.

    Attributes without an absolute URL are left alone.
    """
    if "<img" not in html:
        return html

    def _best(match: re.Match) -> str:
        urls = [u for u in match.group(1).split(" ") if u.startswith("http")]
        if not urls:
            return match.group(0)
        return f'src="{urls[-1]}"'

    return _SRCSET_RE.sub(_best, html)

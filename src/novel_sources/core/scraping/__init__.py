"""Core scraping primitives shared by the source adapters and flows.

Small building blocks: Fetcher, URL normalizer, date and HTML clean-up
helpers and the hydration payload decoder.
"""

from .dates import format_iso_date, parse_russian_date
from .fetcher import Fetcher
from .html import pick_srcset, strip_blocks, strip_scripts
from .hydration import (
    GraphResolver,
    HydrationState,
    extract_table,
    table_from_soup,
    get_value_by_key,
    locate_key,
    resolve,
)
from .normalizer import normalize_url, relative_path

__all__ = [
    "Fetcher",
    "normalize_url",
    "relative_path",
    "parse_russian_date",
    "format_iso_date",
    "strip_scripts",
    "strip_blocks",
    "pick_srcset",
    "extract_table",
    "table_from_soup",
    "locate_key",
    "resolve",
    "get_value_by_key",
    "GraphResolver",
    "HydrationState",
]

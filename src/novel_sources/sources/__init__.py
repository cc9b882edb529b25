"""Registry and helpers to select a source adapter by id or by URL.

Every site is registered under its id. URLs are matched by host, with or
without the ``www.`` prefix.
"""

from typing import Callable, Dict, List, Optional
from urllib.parse import urlparse

from novel_sources.core.scraping.fetcher import Fetcher

from .base_source import BaseSource
from .hexnovels import HexNovelsSource
from .ifreedom import IFREEDOM_SITES, IfreedomMetadata, IfreedomSource
from .webnovel_rating import WebnovelRatingSource


def _ifreedom_factory(metadata: IfreedomMetadata) -> Callable[..., BaseSource]:
    def build(fetcher: Optional[Fetcher] = None) -> BaseSource:
        return IfreedomSource(metadata, fetcher)

    return build


_REGISTRY: Dict[str, Callable[..., BaseSource]] = {
    HexNovelsSource.id: HexNovelsSource,
    WebnovelRatingSource.id: WebnovelRatingSource,
}
_SITES: Dict[str, str] = {
    "hexnovels.me": HexNovelsSource.id,
    "webnovel.com": WebnovelRatingSource.id,
}
for _meta in IFREEDOM_SITES:
    _REGISTRY[_meta.id] = _ifreedom_factory(_meta)
    _SITES[urlparse(_meta.source_site).netloc] = _meta.id


def available_sources() -> List[str]:
    return sorted(_REGISTRY)


def get_source(source_id: str, fetcher: Optional[Fetcher] = None) -> BaseSource:
    """Instantiate the adapter registered under ``source_id``."""
    factory = _REGISTRY.get(source_id)
    if factory is None:
        raise ValueError(f"Source '{source_id}' is not registered.")
    return factory(fetcher=fetcher)


def get_source_for_url(url: str, fetcher: Optional[Fetcher] = None) -> Optional[BaseSource]:
    domain = urlparse(url).netloc.lower()
    if domain.startswith("www."):
        domain = domain[4:]
    source_id = _SITES.get(domain)
    if source_id is None:
        return None
    return get_source(source_id, fetcher)


__all__ = [
    "BaseSource",
    "HexNovelsSource",
    "IfreedomSource",
    "WebnovelRatingSource",
    "available_sources",
    "get_source",
    "get_source_for_url",
]

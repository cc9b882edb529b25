"""Abstract base source (site adapter) used by tasks and flows.

An adapter knows one site: its URLs and its selectors. HTTP goes through a
shared `Fetcher`, so tests can swap `fetch` for canned HTML.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from novel_sources.core.scraping.fetcher import Fetcher
from novel_sources.core.scraping.normalizer import relative_path
from novel_sources.models import NovelItem, PickerFilter, SourceNovel

logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """
    Contract every site adapter follows.

    Flows only talk to this interface, so a new site never changes them.
    """

    id: str = ""
    name: str = ""
    site: str = ""
    version: str = "1.0.0"
    filters: Dict[str, PickerFilter] = {}

    def __init__(self, fetcher: Fetcher | None = None):
        self.fetcher = fetcher or Fetcher()

    @property
    def headers(self) -> Dict[str, str]:
        return {}

    def absolute(self, path: str) -> str:
        return urljoin(self.site.rstrip("/") + "/", path)

    def relative(self, url: str) -> str:
        return relative_path(url, self.site)

    def fetch(self, path_or_url: str) -> str:
        """Return the HTML of a site path (or absolute URL)."""
        url = self.absolute(path_or_url)
        logger.info("[%s] fetching %s", self.id, url)
        return self.fetcher.get_text(url, headers=self.headers)

    @staticmethod
    def soup(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    def filter_value(self, key: str, filters: Optional[dict] = None) -> str:
        """Selected value of picker ``key``, falling back to its default."""
        picker = self.filters[key]
        return picker.choose((filters or {}).get(key))

    @abstractmethod
    def popular_novels(
        self, page: int, show_latest: bool = False, filters: Optional[dict] = None
    ) -> List[NovelItem]:
        """One page of the catalog (1-based)."""

    @abstractmethod
    def parse_novel(self, novel_path: str) -> SourceNovel:
        """Metadata and chapter list of a novel."""

    @abstractmethod
    def parse_chapter(self, chapter_path: str) -> str:
        """Chapter body as HTML; empty string when nothing was found."""

    @abstractmethod
    def search_novels(self, search_term: str, page: int = 1) -> List[NovelItem]:
        """One page of search results (1-based)."""

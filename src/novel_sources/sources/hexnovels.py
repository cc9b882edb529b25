"""Adapter for HexNovels (hexnovels.me).

Pages are server rendered and carry their state twice: as a hydration
table (``script#__NUXT_DATA__``) and, on older pages, as inline
``window["<key>"] = {...}`` assignments. Structured data is read from the
table first, then from the inline JSON, then from the markup itself.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from novel_sources.core.scraping.dates import format_iso_date
from novel_sources.core.scraping.hydration import HydrationState
from novel_sources.models import (
    DEFAULT_COVER,
    ChapterItem,
    FilterOption,
    NovelItem,
    NovelStatus,
    PickerFilter,
    SourceNovel,
)

from .base_source import BaseSource

logger = logging.getLogger(__name__)

COVER_CDN = "https://gstatic.inuko.me/book"
CONTENT_SELECTORS = (
    ".chapter-content",
    ".reader-content",
    '[class*="content"]',
    "article",
    "main",
)


def inline_state(html: str, key: str) -> Optional[Any]:
    """JSON assigned to ``window["<key>"]`` in an inline script, or None."""
    pattern = (
        r'window\["' + re.escape(key) + r'"\]\s*=\s*'
        r"(\{[\s\S]*?\}|\[[\s\S]*?\]);?\s*</script>"
    )
    match = re.search(pattern, html)
    if not match:
        return None
    try:
        return json.loads(match.group(1))
    except ValueError:
        logger.debug("Inline %s is not valid JSON", key)
        return None


class HexNovelsSource(BaseSource):
    id = "hexnovels"
    name = "HexNovels"
    site = "https://hexnovels.me"
    version = "1.0.0"
    filters = {
        "sort": PickerFilter(
            label="Сортировка",
            value="viewsCount,desc",
            options=[
                FilterOption(label="По популярности", value="viewsCount,desc"),
                FilterOption(label="По дате добавления", value="createdAt,desc"),
                FilterOption(label="По рейтингу", value="rating,desc"),
            ],
        )
    }

    def structured(
        self, html: str, key: str, state: Optional[HydrationState]
    ) -> Optional[Any]:
        """Value stored under ``key`` in ``state`` or in an inline script.

        ``state`` is the page's hydration table, None when it has none.
        """
        if state is not None:
            value = state.get(key)
            if value is not None:
                return value
        return inline_state(html, key)

    def _parse_cards(self, html: str) -> List[NovelItem]:
        soup = self.soup(html)
        novels: List[NovelItem] = []
        for a in soup.select('a[href^="/content/"]'):
            href = a.get("href")
            heading = a.select_one("h3.font-semibold.line-clamp-2")
            title = heading.get_text().strip() if heading else ""
            img = a.select_one("img")
            cover = img.get("src") if img else None
            if href and title:
                novels.append(NovelItem(name=title, path=href, cover=cover or DEFAULT_COVER))
        return novels

    def popular_novels(
        self, page: int, show_latest: bool = False, filters: Optional[dict] = None
    ) -> List[NovelItem]:
        sort = "createdAt,desc" if show_latest else self.filter_value("sort", filters)
        path = f"/content?page={page - 1}&size=30&sort={quote(sort, safe='')}"
        return self._parse_cards(self.fetch(path))

    def search_novels(self, search_term: str, page: int = 1) -> List[NovelItem]:
        path = f"/content?page={page - 1}&size=30&query={quote(search_term, safe='')}"
        return self._parse_cards(self.fetch(path))

    def parse_novel(self, novel_path: str) -> SourceNovel:
        html = self.fetch(novel_path)
        soup = self.soup(html)

        def meta(attr: str, value: str) -> Optional[str]:
            tag = soup.find("meta", attrs={attr: value})
            return tag.get("content") if tag else None

        novel = SourceNovel(
            path=novel_path,
            name=meta("property", "og:title") or "",
            summary=meta("name", "description"),
            cover=meta("property", "og:image") or DEFAULT_COVER,
        )

        state = HydrationState.from_soup(soup)
        book = self.structured(html, "current-book", state)
        if isinstance(book, dict):
            self._apply_book(novel, book)

        chapters = self.structured(html, "current-book-chapters", state)
        if isinstance(chapters, list) and chapters:
            novel.chapters = self._build_chapters(novel_path, chapters)
        return novel

    def _apply_book(self, novel: SourceNovel, book: Dict[str, Any]) -> None:
        novel.name = book.get("name") or novel.name
        novel.summary = book.get("description") or novel.summary

        covers = book.get("covers") or []
        if covers and isinstance(covers[0], dict) and covers[0].get("id"):
            novel.cover = (
                f"{COVER_CDN}/{book.get('id')}/cover/{covers[0]['id']}.jpeg"
                "?width=320&type=webp"
            )

        status = book.get("status")
        if status:
            novel.status = (
                NovelStatus.ONGOING.value
                if status == "ONGOING"
                else NovelStatus.COMPLETED.value
            )

        if book.get("author"):
            novel.author = str(book["author"])

        labels = book.get("labels") or []
        names = [
            str(label["name"])
            for label in labels
            if isinstance(label, dict) and label.get("name")
        ]
        if names:
            novel.genres = ", ".join(names)

        rating = book.get("rating")
        if isinstance(rating, (int, float)) and not isinstance(rating, bool) and rating:
            novel.rating = rating / 2

    def _build_chapters(self, novel_path: str, chapters: List[Any]) -> List[ChapterItem]:
        book_slug = novel_path.rstrip("/").split("/")[-1]

        # one list per translation branch; the longest one wins
        branches: Dict[str, List[Dict[str, Any]]] = {}
        for chapter in chapters:
            if not isinstance(chapter, dict):
                continue
            branch = str(chapter.get("branchId") or "default")
            branches.setdefault(branch, []).append(chapter)
        if not branches:
            return []
        largest = max(branches.values(), key=len)

        items: List[ChapterItem] = []
        for index, chapter in enumerate(largest):
            items.append(
                ChapterItem(
                    name=str(chapter.get("name") or f"Глава {chapter.get('number')}"),
                    path=f"/read/{book_slug}/{chapter.get('id')}",
                    release_time=format_iso_date(chapter.get("createdAt")),
                    chapter_number=index + 1,
                )
            )
        items.reverse()
        return items

    def parse_chapter(self, chapter_path: str) -> str:
        html = self.fetch(chapter_path)
        soup = self.soup(html)

        data = self.structured(html, "current-chapter", HydrationState.from_soup(soup))
        if isinstance(data, dict):
            content = data.get("content")
            if isinstance(content, str) and content:
                return content

        for selector in CONTENT_SELECTORS:
            node = soup.select_one(selector)
            if node is None:
                continue
            content = node.decode_contents()
            if len(content) > 100:
                return content
        logger.warning("[%s] no chapter content at %s", self.id, chapter_path)
        return ""

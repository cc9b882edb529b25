"""Template adapter for sites running the iFreedom theme.

Several Russian translation sites share the same WordPress theme; each one
is an `IfreedomSource` built from its own `IfreedomMetadata`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote

from novel_sources.core.scraping.dates import parse_russian_date
from novel_sources.core.scraping.html import pick_srcset, strip_blocks, strip_scripts
from novel_sources.models import (
    ChapterItem,
    FilterOption,
    NovelItem,
    NovelStatus,
    PickerFilter,
    SourceNovel,
)

from .base_source import BaseSource

BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36"
)

SORT_FILTER = PickerFilter(
    label="Сортировка",
    value="По рейтингу",
    options=[
        FilterOption(label="По рейтингу", value="По рейтингу"),
        FilterOption(label="По дате обновления", value="По дате обновления"),
        FilterOption(label="По дате добавления", value="По дате добавления"),
        FilterOption(label="По просмотрам", value="По просмотрам"),
        FilterOption(label="По названию", value="По названию"),
    ],
)


@dataclass
class IfreedomMetadata:
    id: str
    source_site: str
    source_name: str
    filters: Dict[str, PickerFilter] = field(default_factory=lambda: {"sort": SORT_FILTER})


class IfreedomSource(BaseSource):
    version = "1.0.2"

    def __init__(self, metadata: IfreedomMetadata, fetcher=None):
        super().__init__(fetcher)
        self.id = metadata.id
        self.name = metadata.source_name
        self.site = metadata.source_site.rstrip("/")
        self.filters = metadata.filters

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": BROWSER_UA, "Referer": self.site + "/vse-knigi/"}

    def _parse_cards(self, html: str) -> List[NovelItem]:
        soup = self.soup(html)
        novels: List[NovelItem] = []
        for card in soup.select("div.item-book-slide"):
            link = card.select_one("a.link-book-slide")
            href = link.get("href", "") if link else ""
            img = card.select_one(".block-book-slide-img img")
            title_el = card.select_one(".block-book-slide-title")

            name = title_el.get_text().strip() if title_el else ""
            if not name and link:
                name = link.get("title") or link.get_text().strip()

            path = self.relative(href)
            if name and path:
                novels.append(
                    NovelItem(name=name, path=path, cover=(img.get("src") if img else "") or "")
                )
        return novels

    def popular_novels(
        self, page: int, show_latest: bool = False, filters: Optional[dict] = None
    ) -> List[NovelItem]:
        sort = "По дате обновления" if show_latest else self.filter_value("sort", filters)
        url = "/vse-knigi/?sort=" + quote(sort)

        # multi-value filters are sent as key[]=a&key[]=b
        for key, value in (filters or {}).items():
            if isinstance(value, (list, tuple)) and value:
                url += "".join(f"&{key}[]={quote(str(v))}" for v in value)

        url += f"&bpage={page}"
        return self._parse_cards(self.fetch(url))

    def search_novels(self, search_term: str, page: int = 1) -> List[NovelItem]:
        url = f"/vse-knigi/?searchname={quote(search_term)}&bpage={page}"
        return self._parse_cards(self.fetch(url))

    def parse_novel(self, novel_path: str) -> SourceNovel:
        soup = self.soup(self.fetch(novel_path))

        def text(selector: str) -> str:
            node = soup.select_one(selector)
            return node.get_text().strip() if node else ""

        cover = soup.select_one(".book-img.block-book-slide-img img")
        novel = SourceNovel(
            path=novel_path,
            name=text(".book-info > h1"),
            cover=(cover.get("src") if cover else "") or "",
            summary=text('.tab-content [data-name="Описание"]'),
        )

        genres = [a.get_text().strip() for a in soup.select(".book-info .genreslist a")]
        if genres:
            novel.genres = ",".join(genres)

        info_lists = soup.select(".group-book-info-list .book-info-list")
        # author sits in the second info block
        if len(info_lists) > 1:
            author_el = info_lists[1].select_one("div, a")
            author = author_el.get_text().strip() if author_el else ""
            if author and author != "Не указан":
                novel.author = author

        status_text = "".join(
            el.get_text() for el in info_lists if "Книга завершена" in el.get_text()
        )
        if status_text:
            novel.status = (
                NovelStatus.COMPLETED.value
                if "завершена" in status_text
                else NovelStatus.ONGOING.value
            )

        nodes = soup.select('.tab-content [data-name="Главы"] .chapterinfo')
        total = len(nodes)
        chapters: List[ChapterItem] = []
        for index, node in enumerate(nodes):
            link = node.select_one("a")
            if link is None:
                continue
            name = link.get_text().strip()
            href = link.get("href", "")
            if not name or not href:
                continue
            date_el = node.select_one(".timechapter")
            chapters.append(
                ChapterItem(
                    name=name,
                    path=self.relative(href),
                    release_time=parse_russian_date(date_el.get_text() if date_el else ""),
                    # newest chapter is listed first
                    chapter_number=total - index,
                )
            )
        chapters.reverse()
        novel.chapters = chapters
        return novel

    def parse_chapter(self, chapter_path: str) -> str:
        soup = self.soup(self.fetch(chapter_path))
        container = soup.select_one(".chapter-content")
        html = container.decode_contents() if container else ""
        html = strip_scripts(html)
        html = strip_blocks(html, r'<div class="pc-adv">[\s\S]*?</div>')
        return pick_srcset(html)


IFREEDOM_SITES = [
    IfreedomMetadata(id="ifreedom", source_site="https://ifreedom.su", source_name="iFreedom"),
    IfreedomMetadata(id="bookhamster", source_site="https://bookhamster.ru", source_name="Bookhamster"),
]

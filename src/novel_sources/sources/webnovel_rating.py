from __future__ import annotations

import re
from typing import Dict, List, Optional
from urllib.parse import quote

from novel_sources.models import (
    ChapterItem,
    FilterOption,
    NovelItem,
    PickerFilter,
    SourceNovel,
)

from .base_source import BaseSource

LOCK = "\U0001f512"


def _https(src: Optional[str]) -> str:
    if not src:
        return ""
    return src if src.startswith("http") else "https:" + src


class WebnovelRatingSource(BaseSource):
    """
    Webnovel ranking pages.
    Only the first page of a ranking exists; the catalog is a single page.
    """

    id = "webnovelrating"
    name = "Webnovel Rating"
    site = "https://www.webnovel.com"
    version = "1.0.0"
    filters = {
        "ranking_type": PickerFilter(
            label="Ranking Type",
            value="power_rank",
            options=[
                FilterOption(label="Power", value="power_rank"),
                FilterOption(label="Trending", value="trending_rank"),
                FilterOption(label="Collect", value="collect_rank"),
                FilterOption(label="Popular", value="popular_rank"),
                FilterOption(label="Update", value="update_rank"),
                FilterOption(label="Active", value="active_rank"),
                FilterOption(label="Fandom", value="fandom_rank"),
            ],
        ),
        "time_period": PickerFilter(
            label="Time Period (Power/Trending only)",
            value="monthly",
            options=[
                FilterOption(label="Monthly", value="monthly"),
                FilterOption(label="All-time", value="all_time"),
            ],
        ),
    }

    def __init__(self, fetcher=None, hide_locked: bool = False):
        super().__init__(fetcher)
        self.hide_locked = hide_locked

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            )
        }

    def popular_novels(
        self, page: int, show_latest: bool = False, filters: Optional[dict] = None
    ) -> List[NovelItem]:
        if page > 1:
            return []

        ranking = self.filter_value("ranking_type", filters)
        period = self.filter_value("time_period", filters)
        if ranking in ("power_rank", "trending_rank"):
            path = f"/ranking/novel/{period}/{ranking}"
        else:
            path = f"/ranking/novel/{ranking}"

        soup = self.soup(self.fetch(path))
        novels: List[NovelItem] = []
        for section in soup.select(".j_rank_wrapper section"):
            link = section.select_one('a[href^="/book/"]')
            if link is None or not link.get("href"):
                continue
            heading = section.select_one("h3 a.c_l")
            name = ""
            if heading is not None:
                name = heading.get("title") or heading.get_text().strip()
            img = section.select_one(".g_thumb img")
            cover = (img.get("src") or img.get("data-original")) if img else None
            novels.append(
                NovelItem(
                    name=name or "No Title Found",
                    path=link["href"],
                    cover=_https(cover),
                )
            )
        return novels

    def parse_chapters(self, novel_path: str) -> List[ChapterItem]:
        soup = self.soup(self.fetch(novel_path.rstrip("/") + "/catalog"))
        chapters: List[ChapterItem] = []

        for volume in soup.select(".volume-item"):
            match = re.search(r"Volume\s(\d+)", volume.get_text().strip())
            volume_name = f"Volume {match.group(1)}" if match else "Unknown Volume"

            for li in volume.select("li"):
                link = li.select_one("a")
                if link is None or not link.get("href"):
                    continue
                title = (link.get("title") or "").strip() or "No Title Found"
                name = f"{volume_name}: {title}"
                locked = li.select_one("svg") is not None
                if locked and self.hide_locked:
                    continue
                chapters.append(
                    ChapterItem(name=f"{name} {LOCK}" if locked else name, path=link["href"])
                )
        return chapters

    def parse_novel(self, novel_path: str) -> SourceNovel:
        soup = self.soup(self.fetch(novel_path))

        thumb = soup.select_one(".g_thumb > img")
        tag = soup.select_one(".det-hd-detail > .det-hd-tag")

        synopsis = soup.select_one(".j_synopsis > p")
        summary = ""
        if synopsis is not None:
            for br in synopsis.find_all("br"):
                br.replace_with("\n")
            summary = synopsis.get_text().strip()

        author = ""
        for label in soup.select(".det-info .c_s"):
            if label.get_text().strip() == "Author:":
                sibling = label.find_next_sibling()
                author = sibling.get_text().strip() if sibling else ""
                break

        status = ""
        for svg in soup.select(".det-hd-detail svg"):
            if svg.get("title") == "Status":
                sibling = svg.find_next_sibling()
                status = sibling.get_text().strip() if sibling else ""
                break

        return SourceNovel(
            path=novel_path,
            name=(thumb.get("alt") if thumb else None) or "No Title Found",
            cover=_https(thumb.get("src") if thumb else None),
            genres=(tag.get("title") if tag else None) or "",
            summary=summary or "No Summary Found",
            author=author or "No Author Found",
            status=status or "Unknown Status",
            chapters=self.parse_chapters(novel_path),
        )

    def parse_chapter(self, chapter_path: str) -> str:
        soup = self.soup(self.fetch(chapter_path))
        for node in soup.select(".para-comment"):
            node.decompose()
        title = soup.select_one(".cha-tit")
        words = soup.select_one(".cha-words")
        return (title.decode_contents() if title else "") + (
            words.decode_contents() if words else ""
        )

    def search_novels(self, search_term: str, page: int = 1) -> List[NovelItem]:
        keywords = re.sub(r"\s+", "+", search_term)
        path = f"/search?keywords={quote(keywords)}&pageIndex={page}"
        soup = self.soup(self.fetch(path))

        novels: List[NovelItem] = []
        for li in soup.select(".j_list_container li"):
            thumb = li.select_one(".g_thumb")
            if thumb is None or not thumb.get("href"):
                continue
            img = li.select_one(".g_thumb > img")
            novels.append(
                NovelItem(
                    name=thumb.get("title") or "No Title Found",
                    path=thumb["href"],
                    cover=_https(img.get("src") if img else None),
                )
            )
        return novels

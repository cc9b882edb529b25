"""Prefect tasks wrapping the source adapters.

Each task is one unit of work with retries and a run logger; flows compose
them. Adapters are passed in already built so tasks stay free of registry
lookups.
"""

from __future__ import annotations

from typing import List, Optional

from prefect import get_run_logger, task
from prefect.cache_policies import NONE

from novel_sources.models import NovelItem, SourceNovel
from novel_sources.sources.base_source import BaseSource


@task(name="popular_novels", retries=2, retry_delay_seconds=3, cache_policy=NONE)
def popular_novels_task(
    source: BaseSource,
    page: int,
    show_latest: bool = False,
    filters: Optional[dict] = None,
) -> List[NovelItem]:
    logger = get_run_logger()
    novels = source.popular_novels(page, show_latest=show_latest, filters=filters)
    logger.info("[%s] page %d: %d novels", source.id, page, len(novels))
    return novels


@task(name="search_novels", retries=2, retry_delay_seconds=3, cache_policy=NONE)
def search_novels_task(source: BaseSource, search_term: str, page: int = 1) -> List[NovelItem]:
    logger = get_run_logger()
    novels = source.search_novels(search_term, page)
    logger.info("[%s] search %r page %d: %d novels", source.id, search_term, page, len(novels))
    return novels


@task(name="parse_novel", retries=2, retry_delay_seconds=5, cache_policy=NONE)
def parse_novel_task(source: BaseSource, novel_path: str) -> SourceNovel:
    logger = get_run_logger()
    novel = source.parse_novel(novel_path)
    logger.info("[%s] %s: %d chapters", source.id, novel.name or novel_path, len(novel.chapters))
    return novel


@task(name="parse_chapter", retries=2, retry_delay_seconds=5, cache_policy=NONE)
def parse_chapter_task(source: BaseSource, chapter_path: str) -> str:
    logger = get_run_logger()
    content = source.parse_chapter(chapter_path)
    if not content:
        logger.warning("[%s] empty chapter %s", source.id, chapter_path)
    return content

"""
Scrape flow for one source.

The flow validates the job config, builds the adapter registered under
``source_id`` and, depending on ``mode``:

1. ``popular`` / ``latest``: walks catalog pages 1..``pages``;
2. ``search``: walks search result pages 1..``pages``;
3. ``novel``: parses one novel page and lists its chapters;
4. ``chapter``: parses one chapter page into its HTML content.

Results become a pandas DataFrame. When ``destination_path`` is set the
frame is also written as CSV under the job's raw path.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
from prefect import flow, get_run_logger

from novel_sources.core.config import ScrapeJobConfig
from novel_sources.core.scraping.fetcher import Fetcher
from novel_sources.core.scraping.prefect_tasks import (
    parse_chapter_task,
    parse_novel_task,
    popular_novels_task,
    search_novels_task,
)
from novel_sources.models import NovelItem
from novel_sources.sources import get_source

NOVEL_COLUMNS = ["source", "name", "path", "cover"]
CHAPTER_COLUMNS = ["source", "novel", "name", "path", "release_time", "chapter_number"]
CONTENT_COLUMNS = ["source", "path", "content"]


def save_frame(df: pd.DataFrame, config: ScrapeJobConfig) -> str:
    out_dir = Path(config.raw_path)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{config.mode}.csv"
    df.to_csv(out_path, index=False)
    return str(out_path)


@flow(name="Scrape Source", log_prints=True)
def scrape_source_flow(config_dict: dict) -> pd.DataFrame:
    """Collect listings, a chapter list or one chapter from one source.

    config_dict: must conform to `ScrapeJobConfig`.
    """
    logger = get_run_logger()
    try:
        config = ScrapeJobConfig(**config_dict)
        logger.info("Config valid for job: %s", config.job_name)
    except Exception as e:
        logger.error("Invalid config: %s", e)
        raise

    source = get_source(config.source_id, Fetcher.from_settings(config.fetcher))

    if config.mode == "novel":
        novel = parse_novel_task(source, config.novel_path)
        rows = [
            {"source": source.id, "novel": novel.name, **chapter.model_dump()}
            for chapter in novel.chapters
        ]
        df = pd.DataFrame(rows, columns=CHAPTER_COLUMNS)
    elif config.mode == "chapter":
        content = parse_chapter_task(source, config.chapter_path)
        df = pd.DataFrame(
            [{"source": source.id, "path": config.chapter_path, "content": content}],
            columns=CONTENT_COLUMNS,
        )
    else:
        novels: List[NovelItem] = []
        for page in range(1, config.pages + 1):
            if config.mode == "search":
                batch = search_novels_task(source, config.search_term, page)
            else:
                batch = popular_novels_task(
                    source,
                    page,
                    show_latest=config.mode == "latest",
                    filters=config.filters,
                )
            if not batch:
                logger.info("No results on page %d, stopping", page)
                break
            novels.extend(batch)

        df = pd.DataFrame(
            [{"source": source.id, **n.model_dump()} for n in novels],
            columns=NOVEL_COLUMNS,
        )
        df = df.drop_duplicates(subset=["path"]).reset_index(drop=True)

    logger.info("[%s] collected %d rows", source.id, len(df))

    if config.destination_path:
        path = save_frame(df, config)
        logger.info("Saved %s", path)
    return df


if __name__ == "__main__":
    scrape_source_flow(
        {
            "job_name": "hexnovels_popular",
            "source_id": "hexnovels",
            "mode": "popular",
            "pages": 2,
            "destination_path": "data",
        }
    )

import pytest
from pydantic import ValidationError

from novel_sources.core.config import FetcherSettings, ScrapeJobConfig


def test_defaults_and_raw_path():
    cfg = ScrapeJobConfig(
        job_name="HexNovels_Popular",
        source_id="hexnovels",
        destination_path="data",
        execution_date="2025-01-31",
    )
    assert cfg.job_name == "hexnovels_popular"
    assert cfg.mode == "popular"
    assert cfg.pages == 1
    assert cfg.fetcher == FetcherSettings()
    assert cfg.raw_path == "data/raw/hexnovels_popular/data_captura=2025-01-31"


def test_job_name_with_spaces_is_rejected():
    with pytest.raises(ValidationError):
        ScrapeJobConfig(job_name="bad name", source_id="hexnovels")


@pytest.mark.parametrize(
    "extra",
    [
        {"environment": "qa"},
        {"mode": "everything"},
        {"pages": 0},
        {"mode": "search"},
        {"mode": "novel"},
        {"mode": "chapter"},
        {"fetcher": {"timeout": 0}},
    ],
)
def test_invalid_values(extra):
    with pytest.raises(ValidationError):
        ScrapeJobConfig(job_name="job", source_id="hexnovels", **extra)


def test_mode_arguments():
    search = ScrapeJobConfig(
        job_name="job", source_id="ifreedom", mode="search", search_term="маг"
    )
    assert search.search_term == "маг"
    novel = ScrapeJobConfig(
        job_name="job", source_id="ifreedom", mode="novel", novel_path="/ranobe/x/"
    )
    assert novel.novel_path == "/ranobe/x/"
    chapter = ScrapeJobConfig(
        job_name="job", source_id="hexnovels", mode="chapter", chapter_path="/read/x/1"
    )
    assert chapter.chapter_path == "/read/x/1"

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FetcherSettings(BaseModel):
    """HTTP knobs shared by every source adapter."""

    timeout: int = Field(default=15, gt=0)
    retries: int = Field(default=3, ge=0)
    backoff_factor: float = Field(default=0.3, ge=0)
    user_agents: Optional[List[str]] = None


class ScrapeJobConfig(BaseModel):
    """
    Configuration of one scraping job.
    Says which source to hit, what to collect and where to write it.
    """

    job_name: str
    environment: str = Field(default="dev", pattern="^(dev|staging|prod)$")
    source_id: str
    mode: str = Field(default="popular", pattern="^(popular|latest|search|novel|chapter)$")

    pages: int = Field(default=1, ge=1)
    search_term: Optional[str] = None
    novel_path: Optional[str] = None
    chapter_path: Optional[str] = None
    filters: dict = Field(default_factory=dict)

    # empty destination means "do not write anything"
    destination_path: Optional[str] = None

    execution_date: str = Field(
        default_factory=lambda: datetime.now().strftime("%Y-%m-%d")
    )

    fetcher: FetcherSettings = Field(default_factory=FetcherSettings)

    @property
    def raw_path(self) -> str:
        """Default folder for the raw layer.

        Format: <destination>/raw/<job_name>/data_captura=YYYY-MM-DD
        """
        return (
            f"{self.destination_path}/raw/"
            f"{self.job_name}/data_captura={self.execution_date}"
        )

    @field_validator("job_name")
    def job_name_must_be_slug(cls, v):
        if " " in v:
            raise ValueError("job_name must not contain spaces")
        return v.lower()

    @model_validator(mode="after")
    def mode_arguments_present(self):
        if self.mode == "search" and not self.search_term:
            raise ValueError("search mode requires search_term")
        if self.mode == "novel" and not self.novel_path:
            raise ValueError("novel mode requires novel_path")
        if self.mode == "chapter" and not self.chapter_path:
            raise ValueError("chapter mode requires chapter_path")
        return self

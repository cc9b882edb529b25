"""Data contracts returned by the site adapters."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_COVER = "https://github.com/LNReader/lnreader-plugins/blob/master/icons/src/coverNotAvailable.webp?raw=true"


class NovelStatus(str, Enum):
    UNKNOWN = "Unknown"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    ON_HIATUS = "On Hiatus"
    CANCELLED = "Cancelled"


class NovelItem(BaseModel):
    """One card of a catalog or search listing."""

    name: str
    path: str
    cover: Optional[str] = None


class ChapterItem(BaseModel):
    name: str
    path: str
    release_time: Optional[str] = None
    chapter_number: Optional[float] = None


class SourceNovel(BaseModel):
    """Full novel page: metadata plus the chapter list."""

    path: str
    name: str = ""
    cover: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    genres: Optional[str] = None
    status: Optional[str] = None
    rating: Optional[float] = None
    chapters: List[ChapterItem] = Field(default_factory=list)


class FilterOption(BaseModel):
    label: str
    value: str


class PickerFilter(BaseModel):
    """Single-choice filter exposed by a source (sort order, ranking...)."""

    label: str
    value: str
    options: List[FilterOption]

    def choose(self, selected: Optional[str]) -> str:
        """Return ``selected`` when it is one of the options, else the default."""
        if selected and any(o.value == selected for o in self.options):
            return selected
        return self.value

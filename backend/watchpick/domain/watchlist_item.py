from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"

    @classmethod
    def from_catalog(cls, raw: str) -> "MediaType":
        # The catalog also reports "episode"; everything that is not a movie is kept as a series.
        return cls.MOVIE if (raw or "").strip().lower() == "movie" else cls.SERIES


@dataclass(frozen=True)
class WatchlistItem:
    """A saved title. Display fields are copied at insertion and never refreshed."""

    id: str
    title: str
    year: str
    type: MediaType
    external_id: str
    added_at: str
    poster: Optional[str] = None
    watched: bool = False

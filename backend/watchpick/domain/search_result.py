from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SearchResult:
    """One catalog search hit, already mapped out of the remote response shape."""

    external_id: str
    title: str
    year: str
    # movie | series | episode (as reported by the catalog)
    type: str = "movie"
    poster: Optional[str] = None


@dataclass(frozen=True)
class SearchPage:
    results: list[SearchResult] = field(default_factory=list)
    total_results: int = 0
    # Catalog-provided reason for an empty page (e.g. "Movie not found!").
    error: Optional[str] = None


@dataclass(frozen=True)
class Rating:
    source: str
    value: str


@dataclass(frozen=True)
class MovieDetail:
    """Richer catalog record returned by id/title lookups."""

    external_id: str
    title: str
    year: str
    type: str = "movie"
    rated: Optional[str] = None
    released: Optional[str] = None
    runtime: Optional[str] = None
    genre: Optional[str] = None
    director: Optional[str] = None
    writer: Optional[str] = None
    actors: Optional[str] = None
    plot: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    awards: Optional[str] = None
    poster: Optional[str] = None
    ratings: tuple[Rating, ...] = ()
    metascore: Optional[str] = None
    imdb_rating: Optional[str] = None
    imdb_votes: Optional[str] = None
    total_seasons: Optional[str] = None
    box_office: Optional[str] = None

    def to_search_result(self) -> SearchResult:
        return SearchResult(
            external_id=self.external_id,
            title=self.title,
            year=self.year,
            type=self.type,
            poster=self.poster,
        )

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from watchpick.application.watchlist import SpinPlan
from watchpick.domain import AuthSession, MovieDetail, SearchResult, WatchlistItem


class WatchlistAddRequest(BaseModel):
    external_id: str = Field(..., min_length=1, description="Catalog id (IMDb-style)")
    title: str = Field(..., description="Display title copied into the watchlist")
    year: str = Field(default="", description="Release year as displayed by the catalog")
    type: str = Field(default="movie", description="movie | series | episode")
    poster: Optional[str] = Field(default=None, description="Poster URL, null for no image")

    def to_search_result(self) -> SearchResult:
        return SearchResult(
            external_id=self.external_id.strip(),
            title=self.title,
            year=self.year,
            type=self.type,
            poster=self.poster,
        )


class WatchedUpdateRequest(BaseModel):
    watched: bool = Field(default=True)


class SignUpRequest(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = Field(default=None, description="DD/MM/YYYY or YYYY-MM-DD")
    country: Optional[str] = None


class SignInRequest(BaseModel):
    email: str
    password: str


class ProfileUpdateRequest(BaseModel):
    fields: Dict[str, Any] = Field(default_factory=dict)


def item_view(item: WatchlistItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "external_id": item.external_id,
        "title": item.title,
        "year": item.year,
        "type": item.type.value,
        "poster": item.poster,
        "added_at": item.added_at,
        "watched": item.watched,
    }


def search_result_view(result: SearchResult, *, saved: bool) -> Dict[str, Any]:
    return {
        "external_id": result.external_id,
        "title": result.title,
        "year": result.year,
        "type": result.type,
        "poster": result.poster,
        "saved": saved,
    }


def detail_view(detail: MovieDetail) -> Dict[str, Any]:
    return {
        "external_id": detail.external_id,
        "title": detail.title,
        "year": detail.year,
        "type": detail.type,
        "rated": detail.rated,
        "released": detail.released,
        "runtime": detail.runtime,
        "genre": detail.genre,
        "director": detail.director,
        "writer": detail.writer,
        "actors": detail.actors,
        "plot": detail.plot,
        "language": detail.language,
        "country": detail.country,
        "awards": detail.awards,
        "poster": detail.poster,
        "ratings": [{"source": r.source, "value": r.value} for r in detail.ratings],
        "metascore": detail.metascore,
        "imdb_rating": detail.imdb_rating,
        "imdb_votes": detail.imdb_votes,
        "total_seasons": detail.total_seasons,
        "box_office": detail.box_office,
    }


def spin_view(plan: SpinPlan) -> Dict[str, Any]:
    return {
        "winner": item_view(plan.winner),
        "winner_index": plan.winner_index,
        "eligible": [item_view(i) for i in plan.eligible],
        "frames": [{"index": f.index, "delay_ms": round(f.delay_ms, 1)} for f in plan.frames],
    }


def session_view(session: Optional[AuthSession]) -> Dict[str, Any]:
    if session is None:
        return {"session": None, "user": None}
    return {
        # Tokens stay server-side.
        "session": {
            "expires_in": session.expires_in,
            "token_type": session.token_type,
        },
        "user": {"id": session.user.id, "email": session.user.email, "metadata": session.user.metadata},
    }

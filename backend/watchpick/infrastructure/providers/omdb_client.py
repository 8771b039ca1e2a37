"""
OMDb API HTTP client for title search and detail lookups.

Async aiohttp client with a lazily created session, a total-request timeout,
and a mapping from OMDb's capitalized response shape into domain records.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from watchpick.application.ports.movie_search_port import MovieSearchPort
from watchpick.domain import MovieDetail, NetworkError, NotFoundError, Rating, SearchPage, SearchResult
from watchpick.infrastructure.config.settings import OMDB_API_KEY, OMDB_BASE_URL, OMDB_TIMEOUT_S

logger = logging.getLogger(__name__)

# OMDb fills missing fields with this marker.
NOT_AVAILABLE = "N/A"

_MEDIA_TYPES = {"movie", "series", "episode"}


def _clean(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    if not text or text == NOT_AVAILABLE:
        return None
    return text


def _to_int(value: Any) -> int:
    try:
        return int(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0


def parse_search_result(raw: dict[str, Any]) -> Optional[SearchResult]:
    external_id = _clean(raw.get("imdbID"))
    if not external_id:
        return None
    return SearchResult(
        external_id=external_id,
        title=str(raw.get("Title") or "").strip(),
        year=str(raw.get("Year") or "").strip(),
        type=str(raw.get("Type") or "movie").strip().lower() or "movie",
        poster=_clean(raw.get("Poster")),
    )


def parse_search_page(payload: Any) -> SearchPage:
    if not isinstance(payload, dict):
        raise NetworkError("unexpected OMDb search payload")
    if str(payload.get("Response", "")).lower() != "true":
        return SearchPage(results=[], total_results=0, error=_clean(payload.get("Error")))

    raw_results = payload.get("Search") or []
    if not isinstance(raw_results, list):
        raw_results = []
    results = [r for r in (parse_search_result(x) for x in raw_results if isinstance(x, dict)) if r is not None]
    return SearchPage(results=results, total_results=_to_int(payload.get("totalResults")))


def parse_detail(payload: Any) -> MovieDetail:
    if not isinstance(payload, dict):
        raise NetworkError("unexpected OMDb detail payload")
    if str(payload.get("Response", "")).lower() != "true":
        raise NotFoundError(_clean(payload.get("Error")) or "Title not found")

    ratings = tuple(
        Rating(source=str(r.get("Source") or ""), value=str(r.get("Value") or ""))
        for r in (payload.get("Ratings") or [])
        if isinstance(r, dict)
    )
    return MovieDetail(
        external_id=str(payload.get("imdbID") or "").strip(),
        title=str(payload.get("Title") or "").strip(),
        year=str(payload.get("Year") or "").strip(),
        type=str(payload.get("Type") or "movie").strip().lower() or "movie",
        rated=_clean(payload.get("Rated")),
        released=_clean(payload.get("Released")),
        runtime=_clean(payload.get("Runtime")),
        genre=_clean(payload.get("Genre")),
        director=_clean(payload.get("Director")),
        writer=_clean(payload.get("Writer")),
        actors=_clean(payload.get("Actors")),
        plot=_clean(payload.get("Plot")),
        language=_clean(payload.get("Language")),
        country=_clean(payload.get("Country")),
        awards=_clean(payload.get("Awards")),
        poster=_clean(payload.get("Poster")),
        ratings=ratings,
        metascore=_clean(payload.get("Metascore")),
        imdb_rating=_clean(payload.get("imdbRating")),
        imdb_votes=_clean(payload.get("imdbVotes")),
        total_seasons=_clean(payload.get("totalSeasons")),
        box_office=_clean(payload.get("BoxOffice")),
    )


class OmdbClient(MovieSearchPort):
    """Async HTTP client for the OMDb API.

    Transport failures, timeouts and HTTP error statuses raise `NetworkError`.
    An empty search is returned as an empty `SearchPage` (with OMDb's reason
    in `error`); a missing detail record raises `NotFoundError`. There is no
    retry or caching here; callers debounce.

    Attributes:
        _base_url: OMDb endpoint (all calls hit the same URL with different params)
        _api_key: OMDb api key, sent as the `apikey` query param
        _timeout_s: Total request timeout in seconds
        _session: aiohttp ClientSession (lazily initialized)
        _lock: Async lock guarding session creation
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._base_url = (base_url or OMDB_BASE_URL or "").strip()
        self._api_key = (api_key if api_key is not None else OMDB_API_KEY or "").strip()
        self._timeout_s = float(timeout_s or OMDB_TIMEOUT_S or 10.0)
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()
        if not self._api_key:
            logger.warning("OMDb API key not configured (set OMDB_API_KEY)")

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _request(self, params: dict[str, str]) -> Any:
        query = {"apikey": self._api_key, **params}
        try:
            session = await self._get_session()
            async with session.get(self._base_url, params=query, headers={"accept": "application/json"}) as resp:
                if resp.status >= 400:
                    error_text = await resp.text()
                    logger.error(f"OMDb request failed ({resp.status}): {error_text[:200]}")
                    raise NetworkError(f"HTTP error! status: {resp.status}", status_code=resp.status)
                return await resp.json(content_type=None)
        except NetworkError:
            raise
        except asyncio.TimeoutError as exc:
            logger.error(f"OMDb request timeout after {self._timeout_s}s")
            raise NetworkError(f"request timed out after {self._timeout_s}s") from exc
        except aiohttp.ClientError as exc:
            logger.error(f"OMDb request failed: {exc}")
            raise NetworkError(f"request failed: {exc}") from exc
        except ValueError as exc:
            # Body was not JSON.
            logger.error(f"OMDb returned an unreadable body: {exc}")
            raise NetworkError("invalid response body") from exc

    async def search(
        self,
        query: str,
        *,
        media_type: Optional[str] = None,
        year: Optional[str] = None,
        page: int = 1,
    ) -> SearchPage:
        q = (query or "").strip()
        if not q:
            return SearchPage()

        params = {"s": q, "page": str(max(1, int(page)))}
        if media_type:
            mt = media_type.strip().lower()
            if mt not in _MEDIA_TYPES:
                raise ValueError(f"unsupported media_type={media_type!r}")
            params["type"] = mt
        if year:
            params["y"] = str(year).strip()

        logger.debug("OMDb search params=%s", params)
        return parse_search_page(await self._request(params))

    async def get_details(self, external_id: str) -> MovieDetail:
        return parse_detail(await self._request({"i": external_id.strip(), "plot": "full"}))

    async def get_by_title(self, title: str, year: Optional[str] = None) -> MovieDetail:
        params = {"t": title.strip(), "plot": "full"}
        if year:
            params["y"] = str(year).strip()
        return parse_detail(await self._request(params))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

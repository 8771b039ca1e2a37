from __future__ import annotations

from typing import Optional, Protocol

from watchpick.domain import MovieDetail, SearchPage


class MovieSearchPort(Protocol):
    async def search(
        self,
        query: str,
        *,
        media_type: Optional[str] = None,
        year: Optional[str] = None,
        page: int = 1,
    ) -> SearchPage:
        ...

    async def get_details(self, external_id: str) -> MovieDetail:
        ...

    async def get_by_title(self, title: str, year: Optional[str] = None) -> MovieDetail:
        ...

    async def close(self) -> None:
        ...

import asyncio
import sys
import unittest
from pathlib import Path
from typing import Any
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from watchpick.domain import NetworkError, NotFoundError
from watchpick.infrastructure.providers.omdb_client import (
    OmdbClient,
    parse_detail,
    parse_search_page,
    parse_search_result,
)

_SEARCH_PAYLOAD = {
    "Search": [
        {"Title": "Alien", "Year": "1979", "imdbID": "tt0078748", "Type": "movie", "Poster": "https://img/alien.jpg"},
        {"Title": "Aliens", "Year": "1986", "imdbID": "tt0090605", "Type": "movie", "Poster": "N/A"},
        {"Title": "No id", "Year": "2000", "Type": "movie"},
    ],
    "totalResults": "1,234",
    "Response": "True",
}

_DETAIL_PAYLOAD = {
    "Title": "Alien",
    "Year": "1979",
    "Rated": "R",
    "Runtime": "117 min",
    "Genre": "Horror, Sci-Fi",
    "Director": "Ridley Scott",
    "Plot": "The crew of a commercial spacecraft...",
    "Poster": "https://img/alien.jpg",
    "Ratings": [{"Source": "Internet Movie Database", "Value": "8.5/10"}],
    "Metascore": "89",
    "imdbRating": "8.5",
    "imdbID": "tt0078748",
    "Type": "movie",
    "BoxOffice": "N/A",
    "Response": "True",
}


class _FakeResponse:
    def __init__(self, status: int, payload: Any) -> None:
        self.status = status
        self._payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def text(self) -> str:
        return str(self._payload)

    async def json(self, content_type=None):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.closed = False
        self.calls: list[dict[str, Any]] = []

    def get(self, url, params=None, headers=None):
        self.calls.append({"url": url, "params": dict(params or {})})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.closed = True


class TestOmdbParsing(unittest.TestCase):
    def test_search_page_maps_results(self):
        page = parse_search_page(_SEARCH_PAYLOAD)
        self.assertEqual(page.total_results, 1234)
        self.assertIsNone(page.error)
        self.assertEqual([r.external_id for r in page.results], ["tt0078748", "tt0090605"])
        self.assertEqual(page.results[0].poster, "https://img/alien.jpg")
        self.assertIsNone(page.results[1].poster)

    def test_search_without_matches_is_empty_page_with_reason(self):
        page = parse_search_page({"Response": "False", "Error": "Movie not found!"})
        self.assertEqual(page.results, [])
        self.assertEqual(page.total_results, 0)
        self.assertEqual(page.error, "Movie not found!")

    def test_search_result_without_id_is_skipped(self):
        self.assertIsNone(parse_search_result({"Title": "x"}))

    def test_unexpected_payload_is_network_error(self):
        with self.assertRaises(NetworkError):
            parse_search_page(["not", "a", "dict"])

    def test_detail_maps_fields(self):
        detail = parse_detail(_DETAIL_PAYLOAD)
        self.assertEqual(detail.external_id, "tt0078748")
        self.assertEqual(detail.director, "Ridley Scott")
        self.assertIsNone(detail.box_office)
        self.assertEqual(detail.ratings[0].value, "8.5/10")
        as_result = detail.to_search_result()
        self.assertEqual((as_result.external_id, as_result.title, as_result.year), ("tt0078748", "Alien", "1979"))

    def test_detail_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            parse_detail({"Response": "False", "Error": "Incorrect IMDb ID."})
        self.assertEqual(str(ctx.exception), "Incorrect IMDb ID.")


class TestOmdbClient(unittest.IsolatedAsyncioTestCase):
    def _client(self, session: _FakeSession) -> OmdbClient:
        client = OmdbClient(api_key="k", base_url="https://omdb.test/", timeout_s=1.0)

        async def _get_session():
            return session

        patcher = patch.object(client, "_get_session", _get_session)
        patcher.start()
        self.addCleanup(patcher.stop)
        return client

    async def test_blank_query_makes_no_request(self):
        session = _FakeSession(_FakeResponse(200, _SEARCH_PAYLOAD))
        client = self._client(session)
        page = await client.search("   ")
        self.assertEqual(page.results, [])
        self.assertEqual(session.calls, [])

    async def test_search_sends_filters(self):
        session = _FakeSession(_FakeResponse(200, _SEARCH_PAYLOAD))
        client = self._client(session)
        page = await client.search(" alien ", media_type="Movie", year="1979", page=2)
        self.assertEqual(len(page.results), 2)
        self.assertEqual(
            session.calls[0]["params"],
            {"apikey": "k", "s": "alien", "page": "2", "type": "movie", "y": "1979"},
        )

    async def test_unknown_media_type_is_rejected(self):
        client = self._client(_FakeSession(_FakeResponse(200, _SEARCH_PAYLOAD)))
        with self.assertRaises(ValueError):
            await client.search("alien", media_type="game")

    async def test_http_error_status(self):
        client = self._client(_FakeSession(_FakeResponse(503, "unavailable")))
        with self.assertLogs("watchpick.infrastructure.providers.omdb_client", level="ERROR"):
            with self.assertRaises(NetworkError) as ctx:
                await client.search("alien")
        self.assertEqual(ctx.exception.status_code, 503)

    async def test_timeout_is_network_error(self):
        client = self._client(_FakeSession(error=asyncio.TimeoutError()))
        with self.assertLogs("watchpick.infrastructure.providers.omdb_client", level="ERROR"):
            with self.assertRaises(NetworkError):
                await client.get_details("tt0078748")

    async def test_unreadable_body_is_network_error(self):
        client = self._client(_FakeSession(_FakeResponse(200, ValueError("bad json"))))
        with self.assertLogs("watchpick.infrastructure.providers.omdb_client", level="ERROR"):
            with self.assertRaises(NetworkError):
                await client.search("alien")

    async def test_get_details_and_by_title(self):
        session = _FakeSession(_FakeResponse(200, _DETAIL_PAYLOAD))
        client = self._client(session)
        detail = await client.get_details("tt0078748")
        self.assertEqual(detail.title, "Alien")
        await client.get_by_title("Alien", year="1979")
        self.assertEqual(session.calls[0]["params"]["i"], "tt0078748")
        self.assertEqual(session.calls[1]["params"]["t"], "Alien")
        self.assertEqual(session.calls[1]["params"]["y"], "1979")

    async def test_detail_not_found_propagates(self):
        client = self._client(_FakeSession(_FakeResponse(200, {"Response": "False", "Error": "Movie not found!"})))
        with self.assertRaises(NotFoundError):
            await client.get_by_title("zzzz")


if __name__ == "__main__":
    unittest.main()

import io
import sys
import unittest
from pathlib import Path
from typing import Optional
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from rich.console import Console

import watchpick.cli.main as cli
from watchpick.domain import MovieDetail, NetworkError, NotFoundError, SearchPage, SearchResult
from watchpick.infrastructure.bootstrap import build_app_services
from watchpick.infrastructure.persistence import InMemoryKeyValueStore


class _StubSearchClient:
    def __init__(self) -> None:
        self.fail = False

    async def search(self, query: str, *, media_type=None, year=None, page: int = 1) -> SearchPage:
        if self.fail:
            raise NetworkError("boom")
        return SearchPage(results=[SearchResult(external_id="tt1", title="One", year="2001")], total_results=1)

    async def get_details(self, external_id: str) -> MovieDetail:
        if external_id != "tt1":
            raise NotFoundError("Incorrect IMDb ID.")
        return MovieDetail(external_id="tt1", title="One", year="2001")

    async def get_by_title(self, title: str, year: Optional[str] = None) -> MovieDetail:
        return await self.get_details("tt1")

    async def close(self) -> None:
        return None


class _StubIdentityProvider:
    async def close(self) -> None:
        return None


class TestCli(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.out = io.StringIO()
        patcher = patch.object(cli, "console", Console(file=self.out, width=120, color_system=None))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.search = _StubSearchClient()
        self.services = build_app_services(
            storage=InMemoryKeyValueStore(),
            search=self.search,
            identity=_StubIdentityProvider(),
        )

    async def _run(self, *argv: str) -> int:
        args = cli._build_parser().parse_args(list(argv))
        return await cli._run(args, self.services)

    def test_parser_requires_command(self):
        with patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli._build_parser().parse_args([])

    async def test_add_list_and_duplicate(self):
        self.assertEqual(await self._run("add", "tt1"), 0)
        self.assertIn('"One" has been added to your watchlist', self.out.getvalue())
        self.assertEqual(await self._run("add", "tt1"), 1)
        self.assertIn("This item is already in your watchlist", self.out.getvalue())
        self.assertEqual(await self._run("list"), 0)
        self.assertIn("tt1", self.out.getvalue())

    async def test_add_unknown_id(self):
        self.assertEqual(await self._run("add", "tt404"), 1)
        self.assertFalse(self.services.watchlist.is_saved("tt404"))

    async def test_search_failure_exit_code(self):
        self.search.fail = True
        self.assertEqual(await self._run("search", "one"), 1)
        self.assertIn("Failed to search movies", self.out.getvalue())

    async def test_pick_with_everything_watched(self):
        await self._run("add", "tt1")
        await self._run("watched", "tt1")
        self.assertEqual(await self._run("pick"), 0)
        self.assertIn("Nothing to pick", self.out.getvalue())
        self.assertEqual(await self._run("pick", "--include-watched"), 0)
        self.assertIn("Tonight: One", self.out.getvalue())

    async def test_pick_with_spin(self):
        await self._run("add", "tt1")

        async def _no_sleep(_delay):
            return None

        with patch.object(cli.asyncio, "sleep", _no_sleep):
            self.assertEqual(await self._run("pick", "--spin"), 0)
        self.assertIn("Tonight: One", self.out.getvalue())

    async def test_remove(self):
        await self._run("add", "tt1")
        self.assertEqual(await self._run("remove", "tt1"), 0)
        self.assertFalse(self.services.watchlist.is_saved("tt1"))


if __name__ == "__main__":
    unittest.main()

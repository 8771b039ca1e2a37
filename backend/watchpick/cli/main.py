from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

from watchpick.application.watchlist import SpinPlan, plan_spin
from watchpick.domain import NetworkError, NotFoundError, WatchlistItem
from watchpick.infrastructure.bootstrap import AppServices, build_app_services

logger = logging.getLogger(__name__)

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="watchpick", description="Search titles, keep a watchlist, pick something to watch.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Search the catalog.")
    search.add_argument("query")
    search.add_argument("--type", choices=["movie", "series", "episode"], default=None)
    search.add_argument("--year", default=None)
    search.add_argument("--page", type=int, default=1)

    add = sub.add_parser("add", help="Look up a title by catalog id and save it.")
    add.add_argument("external_id")

    remove = sub.add_parser("remove", help="Remove a title from the watchlist.")
    remove.add_argument("external_id")

    watched = sub.add_parser("watched", help="Mark a title as watched.")
    watched.add_argument("external_id")
    watched.add_argument("--unset", action="store_true", help="Mark as not watched instead.")

    sub.add_parser("list", help="Show the watchlist.")

    pick = sub.add_parser("pick", help="Pick a random title.")
    pick.add_argument("--include-watched", action="store_true", help="Also consider watched titles.")
    pick.add_argument("--spin", action="store_true", help="Reveal the pick with a spin (unwatched only).")
    return p


def _items_table(items: Sequence[WatchlistItem]) -> Table:
    table = Table(title="Watchlist")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Year")
    table.add_column("Type")
    table.add_column("Watched")
    for item in items:
        table.add_row(item.external_id, item.title, item.year, item.type.value, "yes" if item.watched else "")
    return table


async def _play_spin(plan: SpinPlan) -> None:
    with Live(Text(""), console=console, refresh_per_second=30) as live:
        for frame in plan.frames:
            live.update(Text(plan.eligible[frame.index].title, style="bold"))
            await asyncio.sleep(frame.delay_ms / 1000.0)


async def _run(args: argparse.Namespace, services: AppServices) -> int:
    store = services.watchlist
    await store.load()
    if store.error:
        console.print(f"[yellow]{store.error}[/yellow]")

    if args.command == "search":
        try:
            page = await services.search.search(args.query, media_type=args.type, year=args.year, page=args.page)
        except NetworkError as e:
            logger.debug("search failed: %s", e)
            console.print("[red]Failed to search movies[/red]")
            return 1
        if not page.results:
            console.print(page.error or "No results.")
            return 0
        table = Table(title=f"Results for {args.query!r} ({page.total_results} total)")
        for col in ("ID", "Title", "Year", "Type", "Saved"):
            table.add_column(col)
        for r in page.results:
            table.add_row(r.external_id, r.title, r.year, r.type, "yes" if store.is_saved(r.external_id) else "")
        console.print(table)
        return 0

    if args.command == "add":
        if store.is_saved(args.external_id):
            console.print("This item is already in your watchlist")
            return 1
        try:
            detail = await services.search.get_details(args.external_id)
        except NotFoundError as e:
            console.print(f"[red]{e}[/red]")
            return 1
        except NetworkError as e:
            logger.debug("detail lookup failed: %s", e)
            console.print("[red]Failed to load title[/red]")
            return 1
        if not await store.add(detail.to_search_result()):
            console.print(f"[red]{store.error}[/red]")
            return 1
        console.print(f'"{detail.title}" has been added to your watchlist')
        return 0

    if args.command == "remove":
        if not await store.remove(args.external_id):
            console.print(f"[red]{store.error}[/red]")
            return 1
        return 0

    if args.command == "watched":
        if not await store.set_watched(args.external_id, not args.unset):
            console.print(f"[red]{store.error}[/red]")
            return 1
        return 0

    if args.command == "list":
        if not store.items:
            console.print("Your watchlist is empty.")
            return 0
        console.print(_items_table(store.items))
        return 0

    if args.command == "pick":
        if args.spin:
            plan = plan_spin(store.items)
            if plan is None:
                console.print("Nothing to pick. Add some unwatched titles first.")
                return 0
            await _play_spin(plan)
            winner = plan.winner
        else:
            winner = store.pick_random(exclude_watched=not args.include_watched)
            if winner is None:
                console.print("Nothing to pick. Add some titles first.")
                return 0
        console.print(f"Tonight: [bold]{winner.title}[/bold] ({winner.year})")
        return 0

    raise ValueError(f"unknown command {args.command!r}")


async def _main(args: argparse.Namespace, services: Optional[AppServices] = None) -> int:
    services = services or build_app_services()
    try:
        return await _run(args, services)
    finally:
        await services.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    raise SystemExit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()

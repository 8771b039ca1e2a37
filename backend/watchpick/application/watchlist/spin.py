"""Frame plan for the "spin" reveal of a random pick.

The winner is drawn before any frame is produced, and the last frame always
shows it. Rendering (timers, widgets) belongs to the surface that plays the
plan back.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Optional

from watchpick.application.watchlist.random_picker import RandomSource, eligible_items, pick_random
from watchpick.domain import WatchlistItem

MIN_CYCLES = 15
EXTRA_CYCLES = 10
FASTEST_DELAY_MS = 50.0
SLOWEST_DELAY_MS = 300.0


@dataclass(frozen=True)
class SpinFrame:
    index: int
    delay_ms: float


@dataclass(frozen=True)
class SpinPlan:
    winner: WatchlistItem
    eligible: tuple[WatchlistItem, ...]
    frames: tuple[SpinFrame, ...]

    @property
    def winner_index(self) -> int:
        return self.frames[-1].index


def frame_delay_ms(cycle: int, total_cycles: int) -> float:
    # Quadratic ease-out: fast at the start, slowing towards the end.
    progress = cycle / total_cycles
    return FASTEST_DELAY_MS + (SLOWEST_DELAY_MS - FASTEST_DELAY_MS) * progress**2


def plan_spin(items: Iterable[WatchlistItem], *, rng: Optional[RandomSource] = None) -> Optional[SpinPlan]:
    pool = eligible_items(items, exclude_watched=True)
    source = rng if rng is not None else random
    winner = pick_random(pool, exclude_watched=True, rng=source)
    if winner is None:
        return None

    total_cycles = MIN_CYCLES + source.randrange(EXTRA_CYCLES)
    winner_index = next(i for i, item in enumerate(pool) if item.id == winner.id)

    frames: list[SpinFrame] = []
    for cycle in range(1, total_cycles):
        frames.append(SpinFrame(index=(cycle - 1) % len(pool), delay_ms=frame_delay_ms(cycle, total_cycles)))
    frames.append(SpinFrame(index=winner_index, delay_ms=SLOWEST_DELAY_MS))

    return SpinPlan(winner=winner, eligible=tuple(pool), frames=tuple(frames))

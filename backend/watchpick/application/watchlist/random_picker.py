from __future__ import annotations

import random
from typing import Iterable, Optional, Protocol

from watchpick.domain import WatchlistItem


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


def eligible_items(items: Iterable[WatchlistItem], *, exclude_watched: bool = True) -> list[WatchlistItem]:
    if exclude_watched:
        return [item for item in items if not item.watched]
    return list(items)


def pick_random(
    items: Iterable[WatchlistItem],
    *,
    exclude_watched: bool = True,
    rng: Optional[RandomSource] = None,
) -> Optional[WatchlistItem]:
    """Select one eligible item uniformly at random.

    Returns None when nothing is eligible; callers are expected to prompt the
    user to add titles rather than treat it as a failure.
    """
    pool = eligible_items(items, exclude_watched=exclude_watched)
    if not pool:
        return None
    source = rng if rng is not None else random
    return pool[source.randrange(len(pool))]

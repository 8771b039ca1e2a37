from watchpick.application.watchlist.random_picker import eligible_items, pick_random
from watchpick.application.watchlist.spin import SpinFrame, SpinPlan, plan_spin
from watchpick.application.watchlist.store import DEFAULT_WATCHLIST_KEY, WatchlistStore

__all__ = [
    "DEFAULT_WATCHLIST_KEY",
    "SpinFrame",
    "SpinPlan",
    "WatchlistStore",
    "eligible_items",
    "pick_random",
    "plan_spin",
]

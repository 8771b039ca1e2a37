import os

from dotenv import load_dotenv

# Service-side settings: HTTP/runtime switches only.
# Infrastructure env/path settings live under `watchpick/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """Read an integer env var, falling back to the default when unset."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var (true/false/1/0/yes/no/on/off)."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


# ===== FastAPI / Uvicorn =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")

# The watchlist store is process-wide state; more than one worker would mean
# several stores racing on the same files.
SERVER_WORKERS = 1

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== Random pick =====

# Default for `exclude_watched` when the caller does not say.
PICK_EXCLUDE_WATCHED = _get_env_bool("PICK_EXCLUDE_WATCHED", True)

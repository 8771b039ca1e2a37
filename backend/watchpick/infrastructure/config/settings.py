import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Infrastructure env/path settings (catalog API, identity service, storage).
# Service-side switches live under `watchpick/config/`.
load_dotenv(override=True)


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects a float, got {raw}") from exc


# ===== Paths =====
#
# Code lives under `<repo>/backend/`; runtime artifacts go to `<repo>/files/`.

INFRASTRUCTURE_DIR = Path(__file__).resolve().parent.parent  # backend/watchpick/infrastructure/
_BACKEND_DIR = INFRASTRUCTURE_DIR.parent.parent  # backend/

if _BACKEND_DIR.name == "backend":
    PROJECT_ROOT = _BACKEND_DIR.parent
else:
    PROJECT_ROOT = Path.cwd()

RUNTIME_ROOT = Path(os.getenv("RUNTIME_ROOT", PROJECT_ROOT / "files")).expanduser()

# ===== Local key-value storage =====

# "file" (durable, one JSON file per key) or "memory" (process lifetime only)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file").strip().lower() or "file"
STORAGE_DIR = Path(os.getenv("STORAGE_DIR", RUNTIME_ROOT / "storage")).expanduser()

WATCHLIST_STORAGE_KEY = os.getenv("WATCHLIST_STORAGE_KEY", "watchlist").strip() or "watchlist"
HAS_LAUNCHED_STORAGE_KEY = os.getenv("HAS_LAUNCHED_STORAGE_KEY", "has_launched").strip() or "has_launched"
USER_TOKEN_STORAGE_KEY = os.getenv("USER_TOKEN_STORAGE_KEY", "user_token").strip() or "user_token"

# ===== OMDb catalog API =====

OMDB_BASE_URL = os.getenv("OMDB_BASE_URL", "https://www.omdbapi.com/").strip()
OMDB_API_KEY = os.getenv("OMDB_API_KEY", "").strip()
OMDB_TIMEOUT_S = _get_env_float("OMDB_TIMEOUT_S", 10.0) or 10.0

# ===== Hosted identity service (Supabase GoTrue + PostgREST) =====

SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip()
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "").strip()
SUPABASE_TIMEOUT_S = _get_env_float("SUPABASE_TIMEOUT_S", 10.0) or 10.0
SUPABASE_PROFILES_TABLE = os.getenv("SUPABASE_PROFILES_TABLE", "profiles").strip() or "profiles"

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

_FALLBACK_SQLITE = "./data/anonboard.db"

REPORT_HIDE_THRESHOLD = 3
MIN_EVIDENCE_SAMPLE = 6


def _normalize_path(raw: str) -> Path:
    """
    Expand ~ and relative paths for SQLite files to an absolute Path.
    """
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def resolve_sqlite_target() -> Tuple[str, Optional[Path]]:
    """
    Return a tuple (uri, path) based on BOARD_SQLITE_PATH.
    - If BOARD_SQLITE_PATH already looks like a sqlite:// URI, it is returned as-is and
      the path component is None.
    - Otherwise, ensure the parent directory exists and return the absolute path.
    """
    raw = (os.environ.get("BOARD_SQLITE_PATH") or _FALLBACK_SQLITE).strip()
    if raw.startswith("sqlite:"):
        return raw, None
    path = _normalize_path(raw)
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path.as_posix()}", path


def resolve_database_uri() -> str:
    """DATABASE_URL wins; legacy postgres:// is normalized; SQLite otherwise."""
    url = (
        os.environ.get("SQLALCHEMY_DATABASE_URI")
        or os.environ.get("DATABASE_URL")
        or ""
    ).strip()
    if not url:
        uri, _ = resolve_sqlite_target()
        return uri
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def engine_options(url: str) -> Dict[str, Any]:
    opts: Dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("postgresql"):
        # Keep this pool small to avoid exhausting server connections
        opts.update({"pool_size": 3, "max_overflow": 5, "pool_recycle": 280})
    return opts


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Settings read once from the environment by create_app(), with `overrides`
    applied on top. An overridden database URI skips the SQLite fallback.
    """
    overrides = dict(overrides or {})
    url = overrides.get("SQLALCHEMY_DATABASE_URI") or resolve_database_uri()
    config = {
        "SQLALCHEMY_DATABASE_URI": url,
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "ADMIN_KEY": os.environ.get("ADMIN_KEY", ""),
        "REPORT_HIDE_THRESHOLD": _env_int("REPORT_HIDE_THRESHOLD", REPORT_HIDE_THRESHOLD),
        "MIN_EVIDENCE_SAMPLE": _env_int("MIN_EVIDENCE_SAMPLE", MIN_EVIDENCE_SAMPLE),
        "REPORT_DEDUPE": _env_flag("REPORT_DEDUPE", False),
        "FP_SALT": os.environ.get("FP_SALT", ""),
        "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "RATELIMIT_ENABLED": _env_flag("RATELIMIT_ENABLED", True),
        "RATELIMIT_STORAGE_URI": os.environ.get("RATELIMIT_STORAGE_URI", "memory://"),
        "CORS_ORIGINS": [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()],
    }
    config.update(overrides)
    config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", engine_options(config["SQLALCHEMY_DATABASE_URI"]))
    return config

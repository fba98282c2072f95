"""File-based JSON helpers for the raw snapshot cache and derived tables.

Provides:
- atomic JSON writes (derived tables are never left half-written)
- TTL staleness checks based on a cached ``_meta.fetched_at``
- the ``_meta`` envelope stored around the raw snapshot
"""

import json
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


def ensure_dir(path: str) -> None:
    """Create a directory (and parents) if missing."""
    if path:
        os.makedirs(path, exist_ok=True)


def _parse_iso(dt_str: str) -> Optional[datetime]:
    try:
        if dt_str.endswith("Z"):
            dt_str = dt_str[:-1] + "+00:00"
        return datetime.fromisoformat(dt_str)
    except (TypeError, ValueError):
        return None


def read_json(path: str) -> Optional[Dict[str, Any]]:
    """Read a JSON object from disk; return None if missing or invalid."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def atomic_write_json(path: str, obj: Dict[str, Any], *, sort_keys: bool = False) -> None:
    """Write ``obj`` to a temp file beside ``path`` and rename it into place."""
    directory = os.path.dirname(path) or "."
    ensure_dir(directory)
    fd, tmp_path = tempfile.mkstemp(
        prefix=os.path.basename(path) + ".",
        suffix=".tmp",
        dir=directory,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=2, sort_keys=sort_keys)
        os.replace(tmp_path, path)
    finally:
        try:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        except OSError:
            pass


def file_is_stale(path: str, ttl_days: int) -> bool:
    """Return True when the cached snapshot is missing, invalid, or older than TTL."""
    data = read_json(path)
    if not data or "_meta" not in data:
        return True
    fetched_at = (data.get("_meta") or {}).get("fetched_at")
    dt = _parse_iso(fetched_at) if isinstance(fetched_at, str) else None
    if not dt:
        return True
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (datetime.now(timezone.utc) - dt) > timedelta(days=ttl_days)


def wrap_raw(
    url: str,
    payload: Any,
    etag: Optional[str],
    status: Optional[int],
) -> Dict[str, Any]:
    """Wrap an unmodified snapshot payload with ``_meta`` fields."""
    return {
        "_meta": {
            "fetched_at": datetime.now(timezone.utc).isoformat(),
            "url": url,
            **({"etag": etag} if etag else {}),
            **({"status": status} if status is not None else {}),
        },
        "data": payload,
    }

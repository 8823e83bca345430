# backend/app/services/board/status.py
"""
Column registry helpers: slug/key derivation and status resolution.

Clients (and the summary path) may send a column key or a human label as a
task status. `resolve_status_key` maps either onto the canonical key by
trying an ordered list of matchers, first hit wins:

    exact key -> label (case-insensitive) -> normalized -> compact

Nothing here touches the database; callers pass the owner's columns in
board order.
"""
import re
from typing import Callable, Iterable, Optional, Sequence

from app.models.column import BoardColumn

MAX_KEY_LENGTH = 40
DEFAULT_KEY = "column"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(value: str) -> str:
    """'  In  Progress!! ' -> 'in-progress'"""
    return _NON_ALNUM.sub("-", (value or "").lower()).strip("-")


def compact(value: str) -> str:
    """Normalized form without hyphens: 'In Progress' -> 'inprogress'"""
    return normalize(value).replace("-", "")


def slugify(label: str) -> str:
    slug = normalize(label)[:MAX_KEY_LENGTH].strip("-")
    return slug or DEFAULT_KEY


def ensure_unique_key(base: str, existing: Iterable[str]) -> str:
    """Return `base`, or the first free `base-2`, `base-3`, ..."""
    taken = set(existing)
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


# ── Matchers ──────────────────────────────────────────────────────────────────
# Each takes (columns, desired) and returns the matching column or None.

Matcher = Callable[[Sequence[BoardColumn], str], Optional[BoardColumn]]


def match_key(columns: Sequence[BoardColumn], desired: str) -> Optional[BoardColumn]:
    return next((c for c in columns if c.key == desired), None)


def match_label(columns: Sequence[BoardColumn], desired: str) -> Optional[BoardColumn]:
    wanted = desired.strip().lower()
    return next((c for c in columns if (c.label or "").strip().lower() == wanted), None)


def match_normalized(columns: Sequence[BoardColumn], desired: str) -> Optional[BoardColumn]:
    wanted = normalize(desired)
    if not wanted:
        return None
    return next(
        (c for c in columns if wanted in (normalize(c.label), normalize(c.key))),
        None,
    )


def match_compact(columns: Sequence[BoardColumn], desired: str) -> Optional[BoardColumn]:
    wanted = compact(desired)
    if not wanted:
        return None
    return next(
        (c for c in columns if wanted in (compact(c.label), compact(c.key))),
        None,
    )


MATCHERS: tuple[Matcher, ...] = (match_key, match_label, match_normalized, match_compact)


def resolve_column(columns: Sequence[BoardColumn], desired: Optional[str]) -> Optional[BoardColumn]:
    """Find the column a status value refers to. Empty values mean the first column."""
    if not columns:
        return None
    if desired is None or not str(desired).strip():
        return columns[0]
    desired = str(desired)
    for matcher in MATCHERS:
        column = matcher(columns, desired)
        if column is not None:
            return column
    return None


def resolve_status_key(columns: Sequence[BoardColumn], desired: Optional[str]) -> Optional[str]:
    column = resolve_column(columns, desired)
    return column.key if column else None

# feedsync/domain/parsing.py
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "0"}


def to_float(x: Any) -> float | None:
    """Number-or-None. Never raises (huge ints included), never returns NaN/inf."""
    if x is None or x == "" or isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(f):
        return None
    return f


def to_int(x: Any) -> int | None:
    f = to_float(x)
    if f is None:
        return None
    return int(f)


def to_decimal(x: Any) -> Decimal | None:
    """Money-or-None. Same leniency as to_float, but keeps the upstream digits."""
    f = to_float(x)
    if f is None:
        return None
    if isinstance(x, int):
        return Decimal(x)
    try:
        # via str() so 0.1 stays 0.1 and not the binary expansion
        return Decimal(str(x).strip()) if isinstance(x, str) else Decimal(str(f))
    except InvalidOperation:
        return Decimal(str(f))


def to_str(x: Any) -> str | None:
    """Stripped text or None. Integral floats render without the trailing .0"""
    if x is None or isinstance(x, (dict, list, tuple, set)):
        return None
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, float):
        if not math.isfinite(x):
            return None
        if x.is_integer():
            return str(int(x))
    s = str(x).strip()
    return s or None


def to_bool(x: Any) -> bool | None:
    if x is None:
        return None
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return bool(x)
    if isinstance(x, str):
        s = x.strip().lower()
        if s in _TRUE_STRINGS:
            return True
        if s in _FALSE_STRINGS:
            return False
    return None


def to_str_list(x: Any) -> list[str]:
    """
    Tag-list coercion. Upstream sends arrays, but some feeds collapse a
    one-element array into a bare scalar.
    """
    if x is None:
        return []
    if isinstance(x, (list, tuple)):
        out: list[str] = []
        for item in x:
            s = to_str(item)
            if s is not None:
                out.append(s)
        return out
    s = to_str(x)
    return [s] if s is not None else []


def to_date(x: Any) -> date | None:
    """ISO date or datetime string (RESO sends both) -> date."""
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    s = to_str(x)
    if s is None:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None

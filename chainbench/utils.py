"""Small helpers shared across the package."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

import requests

T = TypeVar("T")

_INTEGER = re.compile(r"[+-]?\d+")
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)


def contains(items: Iterable[T] | None, term: T) -> bool:
    """Return True when ``term`` is one of ``items``; a missing collection holds nothing."""
    return items is not None and term in items


def get_value(value: T | None, default: Any = None) -> Any:
    """Return ``value``, or ``default`` when it is None."""
    return default if value is None else value


def get_branch_name(default_branch: str | None, branch_name: str | None) -> str | None:
    """Return the requested branch, falling back to the repository default."""
    return branch_name if branch_name else default_branch


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if offset[0] == "+" else -1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        microsecond, tzinfo=tz,
    )


def parse_timestamp(data: str | bytes | int) -> datetime:
    """Parse a JSON timestamp given as Unix seconds or as a quoted RFC3339 string.

    Raises ValueError when the data is neither.
    """
    if isinstance(data, bool):
        raise ValueError(f"invalid timestamp: {data!r}")
    if isinstance(data, int):
        return datetime.fromtimestamp(data, tz=timezone.utc)
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    if _INTEGER.fullmatch(text):
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        raise ValueError(f"invalid timestamp: {text!r}")
    return _parse_rfc3339(text[1:-1])


def get_http_client(token: str) -> requests.Session:
    """Return an HTTP session that authenticates every request with ``token``."""
    session = requests.Session()
    session.headers["Authorization"] = f"Bearer {token}"
    return session
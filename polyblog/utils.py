from __future__ import annotations

import datetime as dt
from typing import Iterable, Mapping, Optional, Sequence


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def as_text(value: object, default: str = "") -> str:
    """YAML hands back dates, numbers and None; templates want strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [as_text(item) for item in value if item is not None]
    text = as_text(value).strip()
    return [text] if text else []


def join_keywords(keywords: Iterable[str]) -> str:
    return ", ".join(keywords)


def is_language_code(segment: str) -> bool:
    return len(segment) == 2 and segment.isascii() and segment.isalpha()


def split_language_segment(parts: Sequence[str]) -> tuple[Optional[str], list[str]]:
    """Detect a leading two-letter folder such as ``en`` or ``th``.

    Returns the detected language (or None) and the remaining segments.
    Content discovery and page-metadata scanning both route through here.
    """
    parts = [part for part in parts if part not in ("", ".")]
    if parts and is_language_code(parts[0]):
        return parts[0], parts[1:]
    return None, parts


def resolve_with_fallback(
    sections: Mapping[str, Mapping[str, object]],
    table: Iterable[tuple[str, str, str, str]],
) -> dict[str, str]:
    """Resolve ``(target, section, key, default)`` rows against optional config sections.

    Missing sections, missing keys and empty strings all yield the default.
    """
    resolved = {}
    for target, section, key, default in table:
        value = (sections.get(section) or {}).get(key)
        text = as_text(value).strip()
        resolved[target] = text if text else default
    return resolved


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


def iso_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.isoformat()

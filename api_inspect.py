"""Helpers for poking at JSON already fetched from the CMS.

Used by the debug scripts to narrow a list response down to the records
and fields of interest without adding server-side filters.
"""

from typing import Any, Dict, Iterable, List


def get_path(record: Any, path: str) -> Any:
    """Dotted lookup (`liga.name`, `teams.0.name`); None when any step is missing."""
    current = record
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def parse_criteria(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse CLI `key=value` pairs into a criteria dict."""
    criteria = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid filter '{pair}', expected key=value")
        criteria[key.strip()] = value.strip()
    return criteria


def _matches(value: Any, expected: str) -> bool:
    if isinstance(value, bool):
        return str(value).lower() == expected.lower()
    if value is None:
        return expected.lower() in ("", "none", "null")
    return str(value).lower() == expected.lower()


def filter_records(records: List[Dict[str, Any]], criteria: Dict[str, str]) -> List[Dict[str, Any]]:
    """Keep records whose dotted fields all equal the expected values (case-insensitive)."""
    if not criteria:
        return list(records)
    return [
        r for r in records
        if all(_matches(get_path(r, key), expected) for key, expected in criteria.items())
    ]


def select_fields(records: List[Dict[str, Any]], fields: List[str]) -> List[Dict[str, Any]]:
    """Project each record onto the given dotted fields."""
    if not fields:
        return list(records)
    return [{f: get_path(r, f) for f in fields} for r in records]


def summarize(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data")
    pagination = (body.get("meta") or {}).get("pagination") or {}
    if isinstance(data, list):
        count = len(data)
    else:
        count = 0 if data is None else 1
    return {
        "count": count,
        "total": pagination.get("total", count),
        "page": pagination.get("page", 1),
        "pageCount": pagination.get("pageCount", 1),
    }

"""Placeholder rendering and response mapping for Data Connector elements."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from app.schemas import DataMappingEntry

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.\-]+)\s*\}\}")
_MISSING = object()


def resolve_path(source: Any, path: str, default: Any = None) -> Any:
    """Walk ``source`` along a dot separated ``path``.

    Integer segments index into lists. An empty path returns ``source`` itself.
    """

    path = (path or "").strip()
    if not path or path == ".":
        return source

    current = source
    for segment in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, list) and segment.lstrip("-").isdigit():
            position = int(segment)
            current = current[position] if -len(current) <= position < len(current) else _MISSING
        else:
            current = _MISSING
        if current is _MISSING:
            return default
    return current


def render_template(value: Any, context: Mapping[str, Any]) -> Any:
    """Replace ``{{ var }}`` placeholders in strings, recursing into dicts and lists.

    A string that is exactly one placeholder keeps the referenced value's type;
    otherwise values are interpolated as text and missing values become "".
    """

    if isinstance(value, str):
        whole = _PLACEHOLDER.fullmatch(value.strip())
        if whole:
            resolved = resolve_path(context, whole.group(1))
            return "" if resolved is None else resolved

        def _substitute(match: re.Match) -> str:
            resolved = resolve_path(context, match.group(1))
            return "" if resolved is None else str(resolved)

        return _PLACEHOLDER.sub(_substitute, value)
    if isinstance(value, Mapping):
        return {key: render_template(item, context) for key, item in value.items()}
    if isinstance(value, list):
        return [render_template(item, context) for item in value]
    return value


def map_response(response: Any, mappings: Iterable[DataMappingEntry]) -> dict[str, Any]:
    return {entry.key: resolve_path(response, entry.value) for entry in mappings}


def merge_request_data(data: Mapping[str, Any] | None, updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new request-data document with ``updates`` applied.

    Existing keys are overwritten in place; keys not yet present are appended
    after the existing ones.
    """

    merged = dict(data or {})
    merged.update(updates)
    return merged

"""Extractor helpers: build key functions from dotted field paths.

An extractor is any callable that maps a stored value to one hashable
key.  Plain lambdas work fine; the helpers here cover the common case of
reading a (possibly nested) field, and back the YAML-driven facets.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any

from multikey_index.config import FacetSpec
from multikey_index.errors import ExtractionError

Extractor = Callable[[Any], Hashable]

_MISSING = object()


def _read_item(obj: Any, step: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(step, _MISSING)
    return _MISSING


def _read_attribute(obj: Any, step: str) -> Any:
    return getattr(obj, step, _MISSING)


def _read_field(obj: Any, step: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(step, _MISSING)
    return getattr(obj, step, _MISSING)


def _path_reader(path: str, read: Callable[[Any, str], Any]) -> Extractor:
    steps = path.split(".")

    def extract(value: Any) -> Hashable:
        current = value
        for step in steps:
            current = read(current, step)
            if current is _MISSING:
                raise ExtractionError(path, step)
        return current

    extract.__name__ = f"extract_{path.replace('.', '_')}"
    extract.__qualname__ = extract.__name__
    return extract


def attribute(path: str) -> Extractor:
    """Read a dotted attribute path, e.g. ``attribute("account.id")``."""
    return _path_reader(path, _read_attribute)


def item(path: str) -> Extractor:
    """Read a dotted mapping-key path, e.g. ``item("profile.email")``."""
    return _path_reader(path, _read_item)


def field(path: str) -> Extractor:
    """Read a dotted path through mappings and plain objects alike."""
    return _path_reader(path, _read_field)


_BUILDERS: dict[str, Callable[[str], Extractor]] = {
    "attribute": attribute,
    "item": item,
    "field": field,
}


def build_extractor(spec: FacetSpec) -> Extractor:
    return _BUILDERS[spec.source](spec.path)


def build_extractors(specs: Iterable[FacetSpec]) -> list[Extractor]:
    return [build_extractor(spec) for spec in specs]

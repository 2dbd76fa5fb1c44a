"""YAML loading for index configs and record files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from multikey_index.config import FacetSpec, IndexConfig
from multikey_index.index import MultiKeyIndex

logger = logging.getLogger(__name__)


def _read_yaml(path: str | Path, what: str) -> Any:
    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)
    if raw_data is None:
        raise ValueError(f"Empty {what} YAML: {path}")
    return raw_data


def _facet_from_raw(raw: Any) -> FacetSpec:
    if isinstance(raw, str):
        return FacetSpec(path=raw)
    if isinstance(raw, dict):
        return FacetSpec(**raw)
    raise ValueError(f"Facet must be a path string or a mapping, got {raw!r}")


def load_index_config(path: str | Path) -> IndexConfig:
    data = _read_yaml(path, "index config")
    if not isinstance(data, dict):
        raise ValueError(f"Index config YAML root must be a mapping: {path}")

    raw_facets = data.get("facets") or []
    if not isinstance(raw_facets, list):
        raise ValueError(f"Index config facets must be a list: {path}")
    facets = [_facet_from_raw(raw) for raw in raw_facets]
    if not facets:
        raise ValueError(f"Index config declares no facets: {path}")

    options = {k: v for k, v in data.items() if k != "facets"}
    return IndexConfig(facets=facets, **options)


def load_records(path: str | Path) -> list[Any]:
    """Load records from a YAML list, or from the ``records`` key of a mapping."""
    data = _read_yaml(path, "records")
    if isinstance(data, dict):
        if "records" not in data:
            logger.warning("Records YAML mapping has no 'records' key: %s", path)
            return []
        data = data["records"]
    if not isinstance(data, list):
        raise ValueError(f"Records YAML must hold a list of records: {path}")
    return data


def load_index(
    config_path: str | Path, records_path: str | Path, **overrides: Any
) -> MultiKeyIndex[Any]:
    """Build an index from a config file and fill it from a records file."""
    index = MultiKeyIndex.from_config(load_index_config(config_path), **overrides)
    for record in load_records(records_path):
        index.add(record)
    return index

"""CLI handler for ``multikey-index inspect``."""

from __future__ import annotations

import sys
from argparse import Namespace
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

import yaml

from multikey_index.cli.report import format_json, format_table
from multikey_index.config import IndexConfig
from multikey_index.errors import MultiKeyIndexError
from multikey_index.index import MultiKeyIndex
from multikey_index.loader import load_index_config, load_records
from multikey_index.telemetry import DUPLICATE_KEY, RecordingTelemetrySink


@dataclass
class FacetStats:
    name: str
    distinct_keys: int
    owned_keys: int


@dataclass
class IndexSummary:
    name: str
    size: int
    records_read: int
    facets: list[FacetStats] = field(default_factory=list)
    collisions: list[tuple[str, str]] = field(default_factory=list)


def summarize(
    config: IndexConfig, records: list[Any], *, quiet: bool = True
) -> IndexSummary:
    """Load *records* into a fresh index and describe the result.

    Duplicate keys are collected from the index telemetry; with *quiet* they
    are not also logged.
    """
    recorder = RecordingTelemetrySink()
    options: dict[str, Any] = {"telemetry_sink": recorder}
    if quiet:
        options["on_collision"] = lambda key, incoming, existing: None
    index = MultiKeyIndex.from_config(config, **options)
    for record in records:
        index.add(record)

    names = config.facet_names()
    distinct: list[set[Hashable]] = [set() for _ in names]
    owned = [0] * len(names)
    for keys, value in index.entries():
        for position, key in enumerate(keys):
            distinct[position].add(key)
            if index.get(key) is value:
                owned[position] += 1

    collisions = [
        (names[event.attributes["facet"]], event.attributes["key"])
        for event in recorder.of(DUPLICATE_KEY)
    ]

    return IndexSummary(
        name=config.name,
        size=index.size,
        records_read=len(records),
        facets=[
            FacetStats(name=n, distinct_keys=len(d), owned_keys=o)
            for n, d, o in zip(names, distinct, owned)
        ],
        collisions=collisions,
    )


def run_inspect(args: Namespace) -> None:
    try:
        config = load_index_config(args.config)
        records = load_records(args.records)
        summary = summarize(config, records, quiet=not args.verbose)
    except (OSError, ValueError, yaml.YAMLError, MultiKeyIndexError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(format_json(summary))
    else:
        print(format_table(summary))

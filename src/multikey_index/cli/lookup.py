"""CLI handler for ``multikey-index lookup``."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from collections.abc import Hashable
from typing import Any

import yaml

from multikey_index.errors import MultiKeyIndexError
from multikey_index.loader import load_index
from multikey_index.telemetry import LoggerTelemetrySink


def candidate_keys(raw: str) -> list[Hashable]:
    """The key as typed, then its YAML scalar reading (``42`` -> 42)."""
    candidates: list[Hashable] = [raw]
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError:
        return candidates
    if isinstance(parsed, Hashable) and parsed is not None and parsed != raw:
        candidates.append(parsed)
    return candidates


def run_lookup(args: Namespace) -> None:
    try:
        options: dict[str, Any] = {}
        if args.verbose:
            options["telemetry_sink"] = LoggerTelemetrySink()
        index = load_index(args.config, args.records, **options)
    except (OSError, ValueError, yaml.YAMLError, MultiKeyIndexError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    record: Any = None
    for key in candidate_keys(args.key):
        if index.has(key):
            record = index.get(key)
            break
    else:
        print(f"Key not found: {args.key}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(record, indent=2, default=str))
    else:
        print(yaml.safe_dump(record, sort_keys=False).rstrip())

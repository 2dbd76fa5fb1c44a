"""Output formatters for index summaries: aligned table and JSON."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multikey_index.cli.summary import IndexSummary


def _row(cols: list[str], widths: list[int]) -> str:
    return "  ".join(c.ljust(w) for c, w in zip(cols, widths)).rstrip()


def format_table(summary: IndexSummary) -> str:
    lines: list[str] = []

    lines.append(f"Index: {summary.name}")
    lines.append("=" * 56)
    lines.append(f"Live values: {summary.size}  (records read: {summary.records_read})")
    lines.append("")

    hdr = ["Facet", "Distinct", "Owned"]
    widths = [30, 10, 10]
    lines.append(_row(hdr, widths))
    lines.append("-" * 56)
    for facet in summary.facets:
        lines.append(
            _row(
                [facet.name[:30], str(facet.distinct_keys), str(facet.owned_keys)],
                widths,
            )
        )
    lines.append("-" * 56)

    if summary.collisions:
        lines.append("")
        lines.append(f"Duplicate keys ({len(summary.collisions)})")
        for facet, key in summary.collisions:
            lines.append(f"  [{facet}] {key}")

    return "\n".join(lines)


def format_json(summary: IndexSummary) -> str:
    data = asdict(summary)
    data["collisions"] = [
        {"facet": facet, "key": key} for facet, key in summary.collisions
    ]
    return json.dumps(data, indent=2)

"""
Serialisers for GraphStats snapshots.

Two outputs are produced:

1. CSV text (export_stats_as_csv)
      - line-oriented, one section title per line followed by key,value
        rows, blank line between sections; no quoting
      - the "Temporal Range" section is only written when a year exists

2. JSON (stats_to_dict / write_stats_json)
      - camelCase keys, stable ordering, for hosts that keep analytics
        alongside saved sessions
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Union

from literary_db.utils.json_io import json_write

from .analytics import GraphStats

CSV_TITLE = "Graph Statistics Export"


# --------------------------------------------------------------------------- #
# Utility helpers
# --------------------------------------------------------------------------- #

def _fmt(value: Any) -> str:
    """Render numbers without a trailing '.0' so integers stay integers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _camelize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {_camel(str(k)) if "_" in str(k) else k: _camelize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_camelize(v) for v in obj]
    return obj


# --------------------------------------------------------------------------- #
# JSON
# --------------------------------------------------------------------------- #

def stats_to_dict(stats: GraphStats) -> Dict[str, Any]:
    """
    JSON-compatible mapping mirroring the GraphStats structure with
    camelCase keys (nodes.byType, edges.mostConnected[].nodeId, ...).
    Node-type keys inside byType are left untouched.
    """
    raw = asdict(stats)
    by_type = raw["nodes"].pop("by_type")
    out = _camelize(raw)
    out["nodes"]["byType"] = dict(by_type)
    return out


def write_stats_json(path: Union[str, Path], stats: GraphStats) -> Path:
    dest = Path(path)
    if not json_write(dest, stats_to_dict(stats)):
        raise OSError(f"Could not write statistics to {dest}")
    return dest


# --------------------------------------------------------------------------- #
# CSV
# --------------------------------------------------------------------------- #

def export_stats_as_csv(stats: GraphStats) -> str:
    by_type = stats.nodes.by_type
    lines: List[str] = [CSV_TITLE, ""]

    lines.append("Node Statistics")
    lines.append(f"Total Nodes,{stats.nodes.total}")
    lines.append(f"Books,{by_type.get('book', 0)}")
    lines.append(f"Authors,{by_type.get('author', 0)}")
    lines.append(f"Themes,{by_type.get('theme', 0)}")
    lines.append(f"With Images,{stats.nodes.with_images}")
    lines.append("")

    lines.append("Edge Statistics")
    lines.append(f"Total Edges,{stats.edges.total}")
    lines.append(f"Average Connections,{_fmt(stats.edges.average_connections)}")
    lines.append("")

    lines.append("Connectivity")
    lines.append(f"Average Degree,{_fmt(stats.connectivity.average_degree)}")
    lines.append(f"Density,{_fmt(stats.connectivity.density)}")
    lines.append(f"Clusters,{stats.connectivity.clusters}")
    lines.append("")

    if stats.temporal.earliest_year is not None:
        lines.append("Temporal Range")
        lines.append(f"Earliest,{stats.temporal.earliest_year}")
        lines.append(f"Latest,{stats.temporal.latest_year}")
        lines.append(f"Range,{stats.temporal.year_range} years")

    return "\n".join(lines)


def parse_stats_csv(text: str) -> Dict[str, Dict[str, str]]:
    """
    Read CSV produced by export_stats_as_csv back into
    {section title: {key: raw value}}. Lines without a comma start a new
    section; the leading export title becomes an empty section.
    """
    sections: Dict[str, Dict[str, str]] = {}
    current = None
    for line in text.splitlines():
        if not line.strip():
            continue
        if "," not in line:
            current = line.strip()
            sections.setdefault(current, {})
            continue
        key, value = line.split(",", 1)
        sections.setdefault(current or "", {})[key] = value
    return sections

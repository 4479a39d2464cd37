"""
Declarative node filters and saved filter presets.

A filter is an ordered list of FilterCriterion values. Each criterion is
one of a closed set of kinds and can be switched off without being
removed. A node is visible iff it passes every enabled criterion; a
disabled criterion always passes, so an empty or all-disabled list
returns the unfiltered set.

Missing attributes do not pass by default: a publication-year criterion
rejects a node that has no year.

Presets are persisted as one JSON document in an external key-value
store under a fixed namespace key.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from literary_db.config import LiteraryDBConfig, load_config
from literary_db.kv_store import open_store
from literary_db.kv_store.base import KeyValueStore
from literary_db.utils.json_io import json_dumps_bytes, json_loads_bytes

from .model import Node, NodeType, type_name

logger = logging.getLogger(__name__)

PRESETS_SUFFIX = "saved-filters"
STORAGE_KEY = f"literary-explorer:{PRESETS_SUFFIX}"

DEFAULT_MIN_YEAR = 0
DEFAULT_MAX_YEAR = 9999


# =========================================================================== #
# Criterion kinds and configs
# =========================================================================== #

def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


class FilterKind(str, Enum):
    NODE_TYPE = "nodeType"
    PUBLICATION_YEAR = "publicationYear"
    SERIES = "series"
    DESCRIPTION = "description"
    CUSTOM = "custom"


@dataclass
class NodeTypeFilterConfig:
    """Per-type visibility switches. Types absent from the map pass."""

    types: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"types": dict(self.types)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeTypeFilterConfig":
        types = _as_mapping(data.get("types") or {}, "node type switches")
        return cls(types={str(k): bool(v) for k, v in types.items()})


@dataclass
class PublicationYearFilterConfig:
    """
    mode:
      range   min_year <= year <= max_year
      before  year < max_year
      after   year > min_year
      exact   year == exact_year
    """

    mode: str = "range"
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    exact_year: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"mode": self.mode}
        if self.min_year is not None:
            out["minYear"] = self.min_year
        if self.max_year is not None:
            out["maxYear"] = self.max_year
        if self.exact_year is not None:
            out["exactYear"] = self.exact_year
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PublicationYearFilterConfig":
        return cls(
            mode=str(data.get("mode", "range")),
            min_year=data.get("minYear"),
            max_year=data.get("maxYear"),
            exact_year=data.get("exactYear"),
        )


@dataclass
class SeriesFilterConfig:
    mode: str = "include"  # include | exclude
    series_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode, "seriesNames": list(self.series_names)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SeriesFilterConfig":
        return cls(
            mode=str(data.get("mode", "include")),
            series_names=[str(s) for s in data.get("seriesNames", [])],
        )


@dataclass
class DescriptionFilterConfig:
    keywords: List[str] = field(default_factory=list)
    match_mode: str = "any"  # any | all
    case_sensitive: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keywords": list(self.keywords),
            "matchMode": self.match_mode,
            "caseSensitive": self.case_sensitive,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DescriptionFilterConfig":
        return cls(
            keywords=[str(k) for k in data.get("keywords", [])],
            match_mode=str(data.get("matchMode", "any")),
            case_sensitive=bool(data.get("caseSensitive", False)),
        )


@dataclass
class CustomFilterConfig:
    """Serialized user predicate. Stored for round-tripping, never evaluated."""

    filter_function: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"filterFunction": self.filter_function}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CustomFilterConfig":
        return cls(filter_function=str(data.get("filterFunction", "")))


FilterConfig = Union[
    NodeTypeFilterConfig,
    PublicationYearFilterConfig,
    SeriesFilterConfig,
    DescriptionFilterConfig,
    CustomFilterConfig,
]

_CONFIG_TYPES = {
    FilterKind.NODE_TYPE: NodeTypeFilterConfig,
    FilterKind.PUBLICATION_YEAR: PublicationYearFilterConfig,
    FilterKind.SERIES: SeriesFilterConfig,
    FilterKind.DESCRIPTION: DescriptionFilterConfig,
    FilterKind.CUSTOM: CustomFilterConfig,
}


@dataclass
class FilterCriterion:
    id: str
    name: str
    kind: Union[FilterKind, str]
    config: FilterConfig
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "type": type_name(self.kind),
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCriterion":
        data = _as_mapping(data, "filter criterion")
        raw_config = _as_mapping(data.get("config") or {}, "filter config")
        raw_kind = str(data.get("type", ""))
        config: FilterConfig
        try:
            kind: Union[FilterKind, str] = FilterKind(raw_kind)
        except ValueError:
            kind = raw_kind
            config = CustomFilterConfig()
        else:
            config = _CONFIG_TYPES[kind].from_dict(raw_config)
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            kind=kind,
            config=config,
            enabled=bool(data.get("enabled", True)),
        )


# =========================================================================== #
# Evaluation
# =========================================================================== #

def _passes_node_type(node: Node, config: NodeTypeFilterConfig) -> bool:
    return config.types.get(type_name(node.type), True)


def _passes_year(node: Node, config: PublicationYearFilterConfig) -> bool:
    year = node.publication_year
    if year is None:
        return False

    min_year = DEFAULT_MIN_YEAR if config.min_year is None else config.min_year
    max_year = DEFAULT_MAX_YEAR if config.max_year is None else config.max_year

    if config.mode == "range":
        return min_year <= year <= max_year
    if config.mode == "before":
        return year < max_year
    if config.mode == "after":
        return year > min_year
    if config.mode == "exact":
        return year == config.exact_year
    return True


def _passes_series(node: Node, config: SeriesFilterConfig) -> bool:
    listed = bool(node.series) and node.series in config.series_names
    return listed if config.mode == "include" else not listed


def _passes_description(node: Node, config: DescriptionFilterConfig) -> bool:
    text = node.description or ""
    if not config.case_sensitive:
        text = text.lower()

    matches = [
        (kw if config.case_sensitive else kw.lower()) in text
        for kw in config.keywords
    ]
    if config.match_mode == "all":
        return all(matches)
    return any(matches)


def apply_criterion(node: Node, criterion: FilterCriterion) -> bool:
    """Evaluate one criterion. Disabled, custom and unknown kinds pass."""
    if not criterion.enabled:
        return True

    kind, config = criterion.kind, criterion.config
    if kind == FilterKind.NODE_TYPE and isinstance(config, NodeTypeFilterConfig):
        return _passes_node_type(node, config)
    if kind == FilterKind.PUBLICATION_YEAR and isinstance(config, PublicationYearFilterConfig):
        return _passes_year(node, config)
    if kind == FilterKind.SERIES and isinstance(config, SeriesFilterConfig):
        return _passes_series(node, config)
    if kind == FilterKind.DESCRIPTION and isinstance(config, DescriptionFilterConfig):
        return _passes_description(node, config)
    return True


def apply_filters(node: Node, criteria: Sequence[FilterCriterion]) -> bool:
    """AND-combination of every criterion."""
    return all(apply_criterion(node, c) for c in criteria)


def filter_nodes(
    nodes: Union[Sequence[Node], Mapping[str, Node]],
    criteria: Sequence[FilterCriterion],
):
    """
    Visible subset, preserving input order. A mapping input returns a
    mapping (id -> node), a sequence returns a list.
    """
    if isinstance(nodes, Mapping):
        return {nid: n for nid, n in nodes.items() if apply_filters(n, criteria)}
    return [n for n in nodes if apply_filters(n, criteria)]


@dataclass
class FilterStats:
    total: int
    filtered: int
    percentage: float


def get_filter_stats(
    nodes: Union[Sequence[Node], Mapping[str, Node]],
    criteria: Sequence[FilterCriterion],
) -> FilterStats:
    total = len(nodes)
    filtered = len(filter_nodes(nodes, criteria))
    return FilterStats(
        total=total,
        filtered=filtered,
        percentage=(filtered / total) * 100.0 if total > 0 else 0.0,
    )


# =========================================================================== #
# Saved presets
# =========================================================================== #

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class SavedFilter:
    id: str
    name: str
    criteria: List[FilterCriterion] = field(default_factory=list)
    description: str = ""
    created_at: str = field(default_factory=_now_iso)
    last_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "criteria": [c.to_dict() for c in self.criteria],
            "createdAt": self.created_at,
        }
        if self.last_used is not None:
            out["lastUsed"] = self.last_used
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SavedFilter":
        data = _as_mapping(data, "saved filter")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            criteria=[FilterCriterion.from_dict(c) for c in data.get("criteria", [])],
            created_at=str(data.get("createdAt", "")),
            last_used=data.get("lastUsed"),
        )


def create_default_filter(name: str) -> SavedFilter:
    """Preset with a single node-type criterion showing books, authors and themes."""
    stamp = int(time.time() * 1000)
    suffix = uuid.uuid4().hex[:6]
    return SavedFilter(
        id=f"filter-{stamp}-{suffix}",
        name=name,
        criteria=[
            FilterCriterion(
                id=f"criterion-{stamp}-{suffix}",
                name="Node Types",
                kind=FilterKind.NODE_TYPE,
                config=NodeTypeFilterConfig(
                    types={
                        NodeType.BOOK.value: True,
                        NodeType.AUTHOR.value: True,
                        NodeType.THEME.value: True,
                    }
                ),
            )
        ],
    )


class FilterPresetStore:
    """
    Named filter presets kept as one JSON list under STORAGE_KEY.

    This is a thin wrapper: failures of the underlying store are logged
    and reported as False / empty results rather than raised.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    @classmethod
    def from_config(cls, config: Optional[LiteraryDBConfig] = None) -> "FilterPresetStore":
        """Open the configured backend; the key lives under the configured namespace."""
        cfg = config or load_config()
        return cls(open_store(cfg), key=f"{cfg.namespace}:{PRESETS_SUFFIX}")

    def list(self) -> List[SavedFilter]:
        try:
            if not self.store.exists(self.key):
                return []
            raw = json_loads_bytes(self.store.get_bytes(self.key))
            return [SavedFilter.from_dict(item) for item in raw]
        except (OSError, KeyError, TypeError, ValueError) as exc:
            logger.error("Failed to load saved filters: %s", exc)
            return []

    def _write(self, presets: List[SavedFilter]) -> bool:
        try:
            self.store.set_bytes(self.key, json_dumps_bytes([p.to_dict() for p in presets]))
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save filters: %s", exc)
            return False

    def save(self, preset: SavedFilter) -> bool:
        """Insert, or replace the preset with the same id in place."""
        presets = self.list()
        for i, existing in enumerate(presets):
            if existing.id == preset.id:
                presets[i] = preset
                break
        else:
            presets.append(preset)
        return self._write(presets)

    def get(self, preset_id: str) -> Optional[SavedFilter]:
        for preset in self.list():
            if preset.id == preset_id:
                return preset
        return None

    def delete(self, preset_id: str) -> bool:
        presets = [p for p in self.list() if p.id != preset_id]
        return self._write(presets)

    def update_last_used(self, preset_id: str) -> Optional[SavedFilter]:
        """Stamp the preset as used now. None when it is missing or the write fails."""
        preset = self.get(preset_id)
        if preset is None:
            return None
        preset.last_used = _now_iso()
        if not self.save(preset):
            return None
        return preset

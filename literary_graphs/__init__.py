"""
Literary graph core package.

Interactive force layout, graph analytics and declarative filtering over
the node/edge collection of a literary exploration session.
"""

# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------
from .model import (
    NodeType,
    EdgeType,
    NodeMetadata,
    Node,
    Edge,
    Graph,
)

from .graph_state import GraphState

# ---------------------------------------------------------------------------
# Configuration and presets
# ---------------------------------------------------------------------------
from .presets import (
    LayoutConfig,
    DEFAULT_CONFIG,
    load_config,
)

# ---------------------------------------------------------------------------
# Layout engine
# ---------------------------------------------------------------------------
from .layout import (
    GraphEngine,
    EngineDestroyedError,
    ForceSimulation,
)

# ---------------------------------------------------------------------------
# Styling
# ---------------------------------------------------------------------------
from .styling import (
    node_color,
    node_radius,
    hex_to_rgba,
)

# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------
from .analytics import (
    calculate_graph_stats,
    GraphStats,
    NodeStats,
    EdgeStats,
    ConnectivityStats,
    ContentStats,
    TemporalStats,
)
from .export import (
    export_stats_as_csv,
    parse_stats_csv,
    stats_to_dict,
    write_stats_json,
)

# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------
from .filters import (
    FilterKind,
    FilterCriterion,
    NodeTypeFilterConfig,
    PublicationYearFilterConfig,
    SeriesFilterConfig,
    DescriptionFilterConfig,
    CustomFilterConfig,
    SavedFilter,
    FilterPresetStore,
    FilterStats,
    apply_criterion,
    apply_filters,
    filter_nodes,
    get_filter_stats,
    create_default_filter,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
__all__ = [
    # Model
    "NodeType",
    "EdgeType",
    "NodeMetadata",
    "Node",
    "Edge",
    "Graph",
    "GraphState",

    # Config
    "LayoutConfig",
    "DEFAULT_CONFIG",
    "load_config",

    # Layout
    "GraphEngine",
    "EngineDestroyedError",
    "ForceSimulation",

    # Styling
    "node_color",
    "node_radius",
    "hex_to_rgba",

    # Analytics
    "calculate_graph_stats",
    "GraphStats",
    "NodeStats",
    "EdgeStats",
    "ConnectivityStats",
    "ContentStats",
    "TemporalStats",
    "export_stats_as_csv",
    "parse_stats_csv",
    "stats_to_dict",
    "write_stats_json",

    # Filters
    "FilterKind",
    "FilterCriterion",
    "NodeTypeFilterConfig",
    "PublicationYearFilterConfig",
    "SeriesFilterConfig",
    "DescriptionFilterConfig",
    "CustomFilterConfig",
    "SavedFilter",
    "FilterPresetStore",
    "FilterStats",
    "apply_criterion",
    "apply_filters",
    "filter_nodes",
    "get_filter_stats",
    "create_default_filter",
]

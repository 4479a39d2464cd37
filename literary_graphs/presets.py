"""
Preset configuration for the literary graph layout engine.

These are deliberately conservative, with a bias toward:
  - stable, readable layouts at interactive frame rates
  - depth-from-seed rendered as distance-from-centre
  - nodes staying where the user drops them
"""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict


# --------------------------------------------------------------------------- #
# Layout configuration
# --------------------------------------------------------------------------- #

@dataclass
class LayoutConfig:
    """
    Geometry and physics parameters for GraphEngine.

    All values are mutable after construction via
    ``GraphEngine.update_config``. Out-of-range values are not validated;
    a negative radius simply renders oddly.
    """

    # canvas
    width: float = 1200.0
    height: float = 800.0
    dimensions: int = 2  # 2 or 3

    # forces
    node_radius: float = 8.0
    link_distance: float = 100.0
    charge_strength: float = -300.0
    enable_collision: bool = True
    collision_padding: float = 4.0
    center_pull_strength: float = 0.05
    radial_ring_spacing: float = 150.0
    radial_strength: float = 0.3
    cluster_strength: float = 0.1

    # drag behaviour
    release_pin_on_drag_end: bool = False

    # cooling schedule
    alpha_min: float = 0.001
    alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0)
    velocity_decay: float = 0.4
    reheat_alpha: float = 0.5
    update_alpha: float = 0.3
    drag_alpha_target: float = 0.3

    @property
    def center(self) -> tuple:
        if self.dimensions == 3:
            return (self.width / 2.0, self.height / 2.0, 0.0)
        return (self.width / 2.0, self.height / 2.0)

    def merged(self, **partial: Any) -> "LayoutConfig":
        """Return a copy with ``partial`` applied. Unknown keys raise ValueError."""
        names = {f.name for f in fields(self)}
        unknown = sorted(set(partial) - names)
        if unknown:
            raise ValueError(f"Unknown layout config keys: {', '.join(unknown)}")
        return replace(self, **partial)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Environment loader
# --------------------------------------------------------------------------- #

def _env_flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)


def load_config() -> LayoutConfig:
    """
    Load LayoutConfig from environment variables, falling back to defaults.

    Recognized variables:
        LITGRAPH_WIDTH, LITGRAPH_HEIGHT           (pixels)
        LITGRAPH_NODE_RADIUS                      (pixels)
        LITGRAPH_LINK_DISTANCE                    (pixels)
        LITGRAPH_CHARGE_STRENGTH                  (negative = repulsion)
        LITGRAPH_ENABLE_COLLISION                 ("true" / "false")
        LITGRAPH_RELEASE_PIN_ON_DRAG_END          ("true" / "false")
        LITGRAPH_DIMENSIONS                       (2 or 3)
    """
    base = LayoutConfig()
    return LayoutConfig(
        width=_env_float("LITGRAPH_WIDTH", base.width),
        height=_env_float("LITGRAPH_HEIGHT", base.height),
        dimensions=int(_env_float("LITGRAPH_DIMENSIONS", base.dimensions)),
        node_radius=_env_float("LITGRAPH_NODE_RADIUS", base.node_radius),
        link_distance=_env_float("LITGRAPH_LINK_DISTANCE", base.link_distance),
        charge_strength=_env_float("LITGRAPH_CHARGE_STRENGTH", base.charge_strength),
        enable_collision=_env_flag("LITGRAPH_ENABLE_COLLISION", base.enable_collision),
        release_pin_on_drag_end=_env_flag(
            "LITGRAPH_RELEASE_PIN_ON_DRAG_END",
            base.release_pin_on_drag_end,
        ),
    )


# Singleton default config
DEFAULT_CONFIG = LayoutConfig()

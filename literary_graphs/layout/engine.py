"""
Interactive layout engine for literary exploration graphs.

GraphEngine attaches a ForceSimulation to the host's node/edge lists and
composes the named forces that give the graph its shape:

  - link       springs whose rest length grows with edge strength
  - charge     uniform repulsion between every pair of nodes
  - center     keeps the mean position at the canvas midpoint
  - x / y      weak pull toward the canvas midpoint
  - collision  (optional) keeps node disks from overlapping
  - radial     rings at depth * ring spacing: the explored frontier
  - cluster / cluster-y  (optional) per-type anchor points

The engine is the source of truth for geometry only. Topology belongs
to the host; edges that reference unknown nodes are skipped silently.

Usage from a frame-driven host:

    engine = GraphEngine(LayoutConfig(width=960, height=640))
    engine.initialize(nodes, edges)
    engine.on_tick(request_redraw)
    ...
    # once per animation frame
    engine.step()
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable, Optional, Sequence, Union

from ..events import EmitFn, log_event
from ..model import Edge, Node, NodeType
from ..presets import DEFAULT_CONFIG, LayoutConfig
from ..styling import cluster_anchor, node_color, node_radius
from .forces import (
    CenterForce,
    CollideForce,
    LinkForce,
    ManyBodyForce,
    PositionForce,
    RadialForce,
)
from .simulation import ForceSimulation

logger = logging.getLogger(__name__)


class EngineDestroyedError(RuntimeError):
    """Raised when a destroyed GraphEngine is asked to simulate."""


class GraphEngine:
    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        *,
        emit: Optional[EmitFn] = None,
        seed: Optional[int] = None,
        **overrides,
    ) -> None:
        base = replace(config or DEFAULT_CONFIG)
        self.config: LayoutConfig = base.merged(**overrides) if overrides else base
        self.emit = emit
        self.seed = seed

        self.simulation: Optional[ForceSimulation] = None
        self._edges: list = []
        self._type_clustering = False
        self._on_tick: Optional[Callable[[], None]] = None
        self._on_end: Optional[Callable[[], None]] = None
        self._destroyed = False

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def type_clustering(self) -> bool:
        return self._type_clustering

    @property
    def nodes(self) -> list:
        return self.simulation.nodes if self.simulation else []

    @property
    def alpha(self) -> float:
        return self.simulation.alpha if self.simulation else 0.0

    @property
    def is_running(self) -> bool:
        return bool(self.simulation and self.simulation.is_running)

    def _check_alive(self) -> None:
        if self._destroyed:
            raise EngineDestroyedError("GraphEngine has been destroyed")

    # ------------------------------------------------------------------ #
    # Graph attachment
    # ------------------------------------------------------------------ #

    def initialize(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """Build a fresh simulation over nodes/edges. Placed nodes keep their geometry."""
        self._check_alive()
        cfg = self.config

        self._edges = list(edges)
        self.simulation = ForceSimulation(
            nodes,
            dimensions=cfg.dimensions,
            center=cfg.center,
            alpha_min=cfg.alpha_min,
            alpha_decay=cfg.alpha_decay,
            velocity_decay=cfg.velocity_decay,
            seed=self.seed,
        )
        self._install_forces()
        self.simulation.on("tick", self._on_tick)
        self.simulation.on("end", self._handle_end)

        log_event(
            f"[layout] attached {len(self.simulation.nodes)} nodes, "
            f"{len(self.simulation.force('link').links)} of {len(self._edges)} edges",
            self.emit,
            log=logger,
        )

    def update_graph(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """
        Swap in a new node/edge set and reheat. Equivalent to initialize()
        when nothing is attached yet. Existing nodes keep position and
        velocity; only unplaced nodes are seeded.
        """
        self._check_alive()
        if self.simulation is None:
            self.initialize(nodes, edges)
            return

        self._edges = list(edges)
        self.simulation.set_nodes(nodes)
        link = self.simulation.force("link")
        if link is not None:
            link.set_edges(self._edges)

        self.simulation.alpha = self.config.update_alpha
        self.simulation.restart()
        log_event(
            f"[layout] graph updated: {len(self.simulation.nodes)} nodes, {len(self._edges)} edges",
            self.emit,
            log=logger,
        )

    def _install_forces(self) -> None:
        sim = self.simulation
        cfg = self.config
        center = cfg.center

        sim.set_force("link", LinkForce(self._edges, distance=self._link_distance))
        sim.set_force("charge", ManyBodyForce(cfg.charge_strength))
        sim.set_force("center", CenterForce(center))
        sim.set_force("x", PositionForce(0, center[0], cfg.center_pull_strength))
        sim.set_force("y", PositionForce(1, center[1], cfg.center_pull_strength))
        if cfg.dimensions == 3:
            sim.set_force("z", PositionForce(2, center[2], cfg.center_pull_strength))
        else:
            sim.set_force("z", None)

        if cfg.enable_collision:
            sim.set_force("collision", CollideForce(self._collision_radius))
        else:
            sim.set_force("collision", None)

        sim.set_force(
            "radial",
            RadialForce(self._ring_radius, center, strength=cfg.radial_strength),
        )
        self._install_clustering()

    def _install_clustering(self) -> None:
        sim = self.simulation
        if self._type_clustering:
            cfg = self.config
            sim.set_force(
                "cluster",
                PositionForce(0, self._cluster_x, cfg.cluster_strength, name="cluster"),
            )
            sim.set_force(
                "cluster-y",
                PositionForce(1, self._cluster_y, cfg.cluster_strength, name="cluster-y"),
            )
        else:
            sim.set_force("cluster", None)
            sim.set_force("cluster-y", None)

    # per-node / per-edge parameter callbacks
    def _link_distance(self, edge: Edge) -> float:
        return self.config.link_distance * (1.0 + edge.strength * 0.5)

    def _collision_radius(self, node: Node) -> float:
        return self.get_node_radius(node) + self.config.collision_padding

    def _ring_radius(self, node: Node) -> float:
        return node.depth * self.config.radial_ring_spacing

    def _cluster_x(self, node: Node) -> float:
        return cluster_anchor(node.type, self.config.width, self.config.height)[0]

    def _cluster_y(self, node: Node) -> float:
        return cluster_anchor(node.type, self.config.width, self.config.height)[1]

    # ------------------------------------------------------------------ #
    # Events and lifecycle
    # ------------------------------------------------------------------ #

    def on_tick(self, callback: Optional[Callable[[], None]]) -> None:
        """Called once per simulation step; keep it cheap (schedule a redraw)."""
        self._check_alive()
        self._on_tick = callback
        if self.simulation is not None:
            self.simulation.on("tick", callback)

    def on_end(self, callback: Optional[Callable[[], None]]) -> None:
        """Called once when the simulation has cooled below alpha_min."""
        self._check_alive()
        self._on_end = callback

    def _handle_end(self) -> None:
        log_event("[layout] simulation settled", self.emit, log=logger)
        if self._on_end is not None:
            self._on_end()

    def start(self) -> None:
        self._check_alive()
        if self.simulation is not None:
            self.simulation.restart()

    def stop(self) -> None:
        self._check_alive()
        if self.simulation is not None:
            self.simulation.stop()

    def reheat(self) -> None:
        """Raise the simulation energy so settled nodes resume adjusting."""
        self._check_alive()
        if self.simulation is None:
            return
        self.simulation.alpha = self.config.reheat_alpha
        self.simulation.restart()
        logger.debug("reheated to alpha=%.2f", self.config.reheat_alpha)

    def step(self) -> bool:
        """Advance one frame. Returns False if there is nothing to do."""
        self._check_alive()
        if self.simulation is None:
            return False
        return self.simulation.step()

    def destroy(self) -> None:
        if self.simulation is not None:
            self.simulation.stop()
            self.simulation.on("tick", None)
            self.simulation.on("end", None)
        self.simulation = None
        self._on_tick = None
        self._on_end = None
        self._edges = []
        self._destroyed = True

    # ------------------------------------------------------------------ #
    # Geometry queries
    # ------------------------------------------------------------------ #

    def get_node_radius(self, node: Node) -> float:
        return node_radius(self.config.node_radius, node.type, node.depth)

    def get_node_color(self, node_type: Union[NodeType, str]) -> str:
        return node_color(node_type)

    def find_node_at(self, x: float, y: float, nodes: Sequence[Node]) -> Optional[Node]:
        """
        First node (in input order) whose disk contains (x, y).
        Nodes the simulation has not placed yet are skipped.
        """
        for node in nodes:
            if node.x is None or node.y is None:
                continue
            distance = math.hypot(x - node.x, y - node.y)
            if distance <= self.get_node_radius(node):
                return node
        return None

    # ------------------------------------------------------------------ #
    # Drag lifecycle
    # ------------------------------------------------------------------ #

    def drag_started(self, node: Node) -> None:
        """Pin the node where it is and keep the rest of the graph reacting."""
        self._check_alive()
        if self.simulation is not None:
            self.simulation.alpha_target = self.config.drag_alpha_target
            self.simulation.restart()
        node.fx = node.x
        node.fy = node.y
        if self.config.dimensions == 3:
            node.fz = node.z

    def dragged(self, node: Node, x: float, y: float, z: Optional[float] = None) -> None:
        node.fx = x
        node.fy = y
        if z is not None:
            node.fz = z

    def drag_ended(self, node: Node) -> None:
        """
        Let the energy fall back to baseline. The pin stays unless
        ``release_pin_on_drag_end`` is set.
        """
        self._check_alive()
        if self.simulation is not None:
            self.simulation.alpha_target = 0.0
        if self.config.release_pin_on_drag_end:
            self.release_pin(node)

    def release_pin(self, node: Node) -> None:
        node.fx = None
        node.fy = None
        node.fz = None

    # ------------------------------------------------------------------ #
    # Clustering and configuration
    # ------------------------------------------------------------------ #

    def apply_type_clustering(self, enable: bool = True) -> None:
        """Add or remove both per-type anchor forces together, then reheat."""
        self._check_alive()
        self._type_clustering = bool(enable)
        if self.simulation is None:
            return
        self._install_clustering()
        self.reheat()

    def update_config(self, **partial) -> None:
        """Merge new configuration values, rebuild the forces, reheat."""
        self._check_alive()
        self.config = self.config.merged(**partial)
        log_event(
            f"[layout] config updated: {', '.join(sorted(partial)) or 'nothing'}",
            self.emit,
            log=logger,
        )
        if self.simulation is None:
            return

        cfg = self.config
        sim = self.simulation
        sim.alpha_min = cfg.alpha_min
        sim.alpha_decay = cfg.alpha_decay
        sim.velocity_decay = cfg.velocity_decay
        sim.center = cfg.center
        sim.set_dimensions(cfg.dimensions)
        self._install_forces()
        self.reheat()

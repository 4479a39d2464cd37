"""
Host-driven force simulation.

The simulation never owns a thread or timer. The host calls ``step()``
from its animation-frame scheduler; each call advances one tick, fires
the ``tick`` listener, and fires ``end`` once the system has cooled
below ``alpha_min``. Listener bodies run synchronously on the caller's
thread and should only schedule a redraw.

Geometry lives on the Node objects themselves. Every tick gathers
positions/velocities/pins into numpy arrays, lets each force add its
contribution, integrates, and writes the result back, so a host that
moves or pins a node between frames is always honoured.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..model import Node
from .forces import Force

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
INITIAL_ANGLE_YAW = math.pi * 20.0 / (9.0 + math.sqrt(221.0))

_AXES = ("x", "y", "z")
_VEL = ("vx", "vy", "vz")
_FIX = ("fx", "fy", "fz")

EVENT_NAMES = ("tick", "end")


class ForceSimulation:
    """
    Velocity-Verlet style simulation with exponential cooling.

    Each tick:
        alpha += (alpha_target - alpha) * alpha_decay
        every force adds to velocities
        v *= (1 - velocity_decay); x += v   (pinned axes snap to the pin)
    """

    def __init__(
        self,
        nodes: Sequence[Node] = (),
        *,
        dimensions: int = 2,
        center: Sequence[float] = (0.0, 0.0),
        alpha_min: float = 0.001,
        alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0),
        velocity_decay: float = 0.4,
        seed: Optional[int] = None,
    ) -> None:
        if dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {dimensions}")
        self.dimensions = dimensions
        self.center = tuple(center)
        self.alpha = 1.0
        self.alpha_min = alpha_min
        self.alpha_decay = alpha_decay
        self.alpha_target = 0.0
        self.velocity_decay = velocity_decay
        self.rng = np.random.default_rng(seed)

        self._nodes: List[Node] = []
        self._forces: Dict[str, Force] = {}
        self._listeners: Dict[str, Optional[Callable[[], None]]] = {k: None for k in EVENT_NAMES}
        self._running = True

        self.set_nodes(nodes)

    # ------------------------------------------------------------------ #
    # Nodes and forces
    # ------------------------------------------------------------------ #

    @property
    def nodes(self) -> List[Node]:
        return self._nodes

    @property
    def is_running(self) -> bool:
        return self._running

    def set_nodes(self, nodes: Sequence[Node]) -> None:
        """Attach a node list; unplaced nodes are seeded, placed nodes keep their geometry."""
        self._nodes = list(nodes)
        self._seed_nodes()
        for force in self._forces.values():
            self._init_force(force)

    def set_dimensions(self, dimensions: int) -> None:
        if dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {dimensions}")
        if dimensions == self.dimensions:
            return
        self.dimensions = dimensions
        self.set_nodes(self._nodes)

    def force(self, name: str) -> Optional[Force]:
        return self._forces.get(name)

    def set_force(self, name: str, force: Optional[Force]) -> None:
        """Install, replace or (with None) remove a named force."""
        if force is None:
            self._forces.pop(name, None)
            return
        self._forces[name] = force
        self._init_force(force)

    def force_names(self) -> List[str]:
        return list(self._forces)

    def _init_force(self, force: Force) -> None:
        force.initialize(self._nodes, self.dimensions, self.rng)

    def _is_unplaced(self, node: Node) -> bool:
        if node.x is None or node.y is None:
            return True
        return self.dimensions == 3 and node.z is None

    def _seed_nodes(self) -> None:
        cx = self.center[0] if len(self.center) > 0 else 0.0
        cy = self.center[1] if len(self.center) > 1 else 0.0
        cz = self.center[2] if len(self.center) > 2 else 0.0

        for i, node in enumerate(self._nodes):
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if self.dimensions == 3 and node.fz is not None:
                node.z = node.fz

            unplaced = self._is_unplaced(node)

            if unplaced:
                if self.dimensions == 3:
                    radius = INITIAL_RADIUS * (0.5 + i) ** (1.0 / 3.0)
                    roll = i * INITIAL_ANGLE
                    yaw = i * INITIAL_ANGLE_YAW
                    if node.x is None or node.y is None:
                        node.x = cx + radius * math.sin(roll) * math.cos(yaw)
                        node.y = cy + radius * math.cos(roll)
                    if node.z is None:
                        node.z = cz + radius * math.sin(roll) * math.sin(yaw)
                else:
                    radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                    angle = i * INITIAL_ANGLE
                    node.x = cx + radius * math.cos(angle)
                    node.y = cy + radius * math.sin(angle)

            if unplaced:
                node.vx = node.vy = 0.0
                if self.dimensions == 3:
                    node.vz = 0.0
            else:
                if node.vx is None:
                    node.vx = 0.0
                if node.vy is None:
                    node.vy = 0.0
                if self.dimensions == 3 and node.vz is None:
                    node.vz = 0.0

    # ------------------------------------------------------------------ #
    # Events and lifecycle
    # ------------------------------------------------------------------ #

    def on(self, name: str, callback: Optional[Callable[[], None]]) -> None:
        """
        Register the listener for "tick" or "end". One listener per event;
        registering again replaces it, None removes it.
        """
        if name not in self._listeners:
            raise ValueError(f"Unknown simulation event: {name!r}")
        self._listeners[name] = callback

    def _dispatch(self, name: str) -> None:
        callback = self._listeners.get(name)
        if callback is not None:
            callback()

    def restart(self) -> "ForceSimulation":
        self._running = True
        return self

    def stop(self) -> "ForceSimulation":
        self._running = False
        return self

    # ------------------------------------------------------------------ #
    # Integration
    # ------------------------------------------------------------------ #

    def _gather(self):
        d = self.dimensions
        n = len(self._nodes)
        pos = np.empty((n, d), float)
        vel = np.empty((n, d), float)
        fixed = np.full((n, d), np.nan)
        for i, node in enumerate(self._nodes):
            for a in range(d):
                pos[i, a] = getattr(node, _AXES[a])
                vel[i, a] = getattr(node, _VEL[a]) or 0.0
                pin = getattr(node, _FIX[a])
                if pin is not None:
                    fixed[i, a] = pin
        return pos, vel, fixed

    def _scatter(self, pos: np.ndarray, vel: np.ndarray) -> None:
        d = self.dimensions
        for i, node in enumerate(self._nodes):
            for a in range(d):
                setattr(node, _AXES[a], float(pos[i, a]))
                setattr(node, _VEL[a], float(vel[i, a]))

    def tick(self, iterations: int = 1) -> "ForceSimulation":
        """Advance ``iterations`` steps without firing events."""
        if not self._nodes:
            for _ in range(iterations):
                self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
            return self

        # pick up nodes the host placed or reset since the last tick
        if any(self._is_unplaced(n) for n in self._nodes):
            self._seed_nodes()

        pos, vel, fixed = self._gather()
        pinned = ~np.isnan(fixed)
        keep = 1.0 - self.velocity_decay

        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
            for force in self._forces.values():
                force(self.alpha, pos, vel)
            vel *= keep
            pos += vel
            pos[pinned] = fixed[pinned]
            vel[pinned] = 0.0

        self._scatter(pos, vel)
        return self

    def step(self) -> bool:
        """
        Host frame hook. Returns False when the simulation is stopped
        (nothing happened), True otherwise.
        """
        if not self._running:
            return False
        self.tick()
        self._dispatch("tick")
        if self.alpha < self.alpha_min:
            self._running = False
            logger.debug("simulation settled (alpha=%.5f)", self.alpha)
            self._dispatch("end")
        return True

    def run(self, max_steps: int = 300) -> int:
        """Step until the simulation settles or ``max_steps`` is reached. Returns steps taken."""
        steps = 0
        while steps < max_steps and self.step():
            steps += 1
        return steps

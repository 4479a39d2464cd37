"""
Force models for the interactive layout simulation.

Each force follows the same two-phase protocol:

  - ``initialize(nodes, dimensions, rng)`` caches per-node parameters
    (radii, ring distances, targets, link endpoints) as numpy arrays.
    It runs whenever the node set or the force's configuration changes.
  - ``force(alpha, pos, vel)`` adds its contribution to ``vel`` in place
    (CenterForce translates ``pos`` instead), scaled by the current
    simulation energy ``alpha``.

``pos`` and ``vel`` are (n, d) float arrays where d is 2 or 3 and row i
belongs to ``nodes[i]``.

Forces that accept callables (distance, radius, target) call them once
per node or edge at initialisation time, never per tick.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import numpy as np

from ..model import Edge, Node, index_nodes, iter_valid_edges


def jiggle(rng: np.random.Generator, size=None) -> np.ndarray:
    """Tiny random offset used to separate coincident points."""
    return (rng.random(size) - 0.5) * 1e-6


# =========================================================================== #
# Base class
# =========================================================================== #

class Force:
    name = "force"

    def __init__(self) -> None:
        self.nodes: Sequence[Node] = ()
        self.dimensions = 2
        self.rng = np.random.default_rng()

    def initialize(
        self,
        nodes: Sequence[Node],
        dimensions: int = 2,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.nodes = nodes
        self.dimensions = dimensions
        if rng is not None:
            self.rng = rng
        self._prepare()

    def _prepare(self) -> None:
        pass

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        raise NotImplementedError


# =========================================================================== #
# Link force
# =========================================================================== #

class LinkForce(Force):
    """
    Spring between connected nodes.

    Per-link stiffness defaults to 1 / min(degree(source), degree(target))
    so hubs are not yanked around by their many neighbours; the correction
    is split between the endpoints in proportion to their degrees.
    Edges whose endpoints are not in the node set are ignored.
    """

    name = "link"

    def __init__(
        self,
        edges: Sequence[Edge] = (),
        distance: Callable[[Edge], float] | float = 30.0,
        strength: Optional[Callable[[Edge], float]] = None,
        iterations: int = 1,
    ) -> None:
        super().__init__()
        self.edges: List[Edge] = list(edges)
        self.distance = distance
        self.strength = strength
        self.iterations = iterations
        self.links: List[Edge] = []
        self._src = np.zeros(0, int)
        self._tgt = np.zeros(0, int)
        self._dist = np.zeros(0)
        self._k = np.zeros(0)
        self._bias = np.zeros(0)

    def set_edges(self, edges: Sequence[Edge]) -> None:
        self.edges = list(edges)
        self._prepare()

    def _prepare(self) -> None:
        index = index_nodes(self.nodes)
        position = {}
        for i, node in enumerate(self.nodes):
            position.setdefault(node.id, i)

        links = list(iter_valid_edges(self.edges, index))
        src = np.array([position[e.source] for e in links], int)
        tgt = np.array([position[e.target] for e in links], int)

        count = np.zeros(len(self.nodes), float)
        np.add.at(count, src, 1.0)
        np.add.at(count, tgt, 1.0)

        if links:
            self._bias = count[src] / (count[src] + count[tgt])
        else:
            self._bias = np.zeros(0)

        if self.strength is None:
            self._k = 1.0 / np.maximum(np.minimum(count[src], count[tgt]), 1.0) if links else np.zeros(0)
        else:
            self._k = np.array([float(self.strength(e)) for e in links], float)

        if callable(self.distance):
            self._dist = np.array([float(self.distance(e)) for e in links], float)
        else:
            self._dist = np.full(len(links), float(self.distance))

        self._src, self._tgt = src, tgt
        self.links = links

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        if self._src.size == 0:
            return
        s, t = self._src, self._tgt
        for _ in range(self.iterations):
            d = pos[t] + vel[t] - pos[s] - vel[s]
            zero = ~d.any(axis=1)
            if zero.any():
                d[zero] = jiggle(self.rng, (int(zero.sum()), d.shape[1]))
            length = np.sqrt((d * d).sum(axis=1))
            k = (length - self._dist) / length * alpha * self._k
            d *= k[:, None]
            np.subtract.at(vel, t, d * self._bias[:, None])
            np.add.at(vel, s, d * (1.0 - self._bias)[:, None])


# =========================================================================== #
# Many-body (charge) force
# =========================================================================== #

class ManyBodyForce(Force):
    """
    Pairwise charge between every pair of nodes. Negative strength repels.

    Exact O(n^2) evaluation; interactive literary graphs stay in the
    hundreds of nodes, where a vectorised pass is cheaper than a quadtree.
    """

    name = "charge"

    def __init__(
        self,
        strength: float = -30.0,
        distance_min: float = 1.0,
        distance_max: float = float("inf"),
    ) -> None:
        super().__init__()
        self.strength = strength
        self.distance_min = distance_min
        self.distance_max = distance_max
        self._strengths = np.zeros(0)

    def _prepare(self) -> None:
        self._strengths = np.full(len(self.nodes), float(self.strength))

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        n = pos.shape[0]
        if n < 2:
            return
        diff = pos[None, :, :] - pos[:, None, :]  # diff[i, j] = pos[j] - pos[i]
        dist2 = (diff * diff).sum(axis=-1)

        coincident = dist2 == 0.0
        np.fill_diagonal(coincident, False)
        if coincident.any():
            diff[coincident] = jiggle(self.rng, (int(coincident.sum()), diff.shape[-1]))
            dist2 = (diff * diff).sum(axis=-1)

        dmin2 = self.distance_min ** 2
        dist2 = np.where(dist2 < dmin2, np.sqrt(dmin2 * dist2), dist2)
        np.fill_diagonal(dist2, np.inf)
        dist2[dist2 >= self.distance_max ** 2] = np.inf

        w = self._strengths[None, :] * alpha / dist2
        vel += (diff * w[:, :, None]).sum(axis=1)


# =========================================================================== #
# Centering
# =========================================================================== #

class CenterForce(Force):
    """Translate all nodes so their mean sits at the centre. Does not touch velocity."""

    name = "center"

    def __init__(self, center: Sequence[float] = (0.0, 0.0), strength: float = 1.0) -> None:
        super().__init__()
        self.center = tuple(float(c) for c in center)
        self.strength = strength

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        if pos.shape[0] == 0:
            return
        target = np.zeros(pos.shape[1])
        target[: min(len(self.center), pos.shape[1])] = self.center[: pos.shape[1]]
        shift = (pos.mean(axis=0) - target) * self.strength
        pos -= shift


# =========================================================================== #
# Collision
# =========================================================================== #

class CollideForce(Force):
    """
    Treat nodes as disks (spheres in 3D) and push overlapping pairs apart.
    The lighter (smaller) node moves more. Not scaled by alpha.
    """

    name = "collision"

    def __init__(
        self,
        radius: Callable[[Node], float] | float = 1.0,
        strength: float = 1.0,
        iterations: int = 1,
    ) -> None:
        super().__init__()
        self.radius = radius
        self.strength = strength
        self.iterations = iterations
        self._radii = np.zeros(0)

    def _prepare(self) -> None:
        if callable(self.radius):
            self._radii = np.array([float(self.radius(n)) for n in self.nodes], float)
        else:
            self._radii = np.full(len(self.nodes), float(self.radius))

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        n = pos.shape[0]
        if n < 2:
            return
        i, j = np.triu_indices(n, 1)
        for _ in range(self.iterations):
            pred = pos + vel
            d = pred[i] - pred[j]
            l2 = (d * d).sum(axis=1)
            r = self._radii[i] + self._radii[j]
            hit = l2 < r * r
            if not hit.any():
                continue
            ii, jj, d, l2, r = i[hit], j[hit], d[hit], l2[hit], r[hit]

            zero = l2 == 0.0
            if zero.any():
                d[zero] = jiggle(self.rng, (int(zero.sum()), d.shape[1]))
                l2 = (d * d).sum(axis=1)

            length = np.sqrt(l2)
            k = (r - length) / length * self.strength
            d *= k[:, None]

            ri2 = self._radii[ii] ** 2
            rj2 = self._radii[jj] ** 2
            denom = ri2 + rj2
            share = np.divide(rj2, denom, out=np.full_like(denom, 0.5), where=denom > 0)

            np.add.at(vel, ii, d * share[:, None])
            np.subtract.at(vel, jj, d * (1.0 - share)[:, None])


# =========================================================================== #
# Radial
# =========================================================================== #

class RadialForce(Force):
    """Pull each node toward a ring of per-node radius around a centre."""

    name = "radial"

    def __init__(
        self,
        radius: Callable[[Node], float] | float,
        center: Sequence[float] = (0.0, 0.0),
        strength: float = 0.1,
    ) -> None:
        super().__init__()
        self.radius = radius
        self.center = tuple(float(c) for c in center)
        self.strength = strength
        self._radii = np.zeros(0)

    def _prepare(self) -> None:
        if callable(self.radius):
            self._radii = np.array([float(self.radius(n)) for n in self.nodes], float)
        else:
            self._radii = np.full(len(self.nodes), float(self.radius))

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        if pos.shape[0] == 0:
            return
        c = np.zeros(pos.shape[1])
        c[: min(len(self.center), pos.shape[1])] = self.center[: pos.shape[1]]
        d = pos - c
        d = np.where(d == 0.0, 1e-6, d)
        r = np.sqrt((d * d).sum(axis=1))
        k = (self._radii - r) * self.strength * alpha / r
        vel += d * k[:, None]


# =========================================================================== #
# Axis positioning
# =========================================================================== #

class PositionForce(Force):
    """
    Pull along one axis (0 = x, 1 = y, 2 = z) toward a per-node target.
    Used for the weak canvas-centre pull and for type clustering.
    """

    def __init__(
        self,
        axis: int,
        target: Callable[[Node], float] | float,
        strength: float = 0.1,
        name: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.axis = axis
        self.target = target
        self.strength = strength
        self.name = name or "xyz"[axis]
        self._targets = np.zeros(0)

    def _prepare(self) -> None:
        if callable(self.target):
            self._targets = np.array([float(self.target(n)) for n in self.nodes], float)
        else:
            self._targets = np.full(len(self.nodes), float(self.target))

    def __call__(self, alpha: float, pos: np.ndarray, vel: np.ndarray) -> None:
        if pos.shape[0] == 0 or self.axis >= pos.shape[1]:
            return
        vel[:, self.axis] += (self._targets - pos[:, self.axis]) * self.strength * alpha


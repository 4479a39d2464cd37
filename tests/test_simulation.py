import math

import numpy as np
import pytest

from literary_graphs.layout import (
    CenterForce,
    CollideForce,
    ForceSimulation,
    LinkForce,
    ManyBodyForce,
    PositionForce,
    RadialForce,
)
from literary_graphs.model import Edge

from conftest import make_node


def placed(nid, x, y, **kwargs):
    node = make_node(nid, **kwargs)
    node.x, node.y = float(x), float(y)
    return node


def gap(a, b):
    return math.hypot(a.x - b.x, a.y - b.y)


def test_unplaced_nodes_are_seeded_on_a_spiral():
    nodes = [make_node(f"n{i}") for i in range(4)]
    ForceSimulation(nodes, center=(100.0, 50.0), seed=0)

    assert nodes[0].x == pytest.approx(100.0 + 10.0 * math.sqrt(0.5))
    assert nodes[0].y == pytest.approx(50.0)
    radii = [math.hypot(n.x - 100.0, n.y - 50.0) for n in nodes]
    assert radii == sorted(radii)
    assert all(n.vx == 0.0 and n.vy == 0.0 for n in nodes)


def test_pinned_nodes_seed_at_their_pin():
    node = make_node("p")
    node.fx, node.fy = 40.0, 60.0
    ForceSimulation([node])
    assert (node.x, node.y) == (40.0, 60.0)


def test_three_dimensional_seed_fills_only_missing_z():
    node = placed("a", 3, 4)
    ForceSimulation([node], dimensions=3)
    assert (node.x, node.y) == (3.0, 4.0)
    assert node.z is not None
    assert node.vz == 0.0


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        ForceSimulation([], dimensions=4)


def test_unknown_event_name():
    with pytest.raises(ValueError):
        ForceSimulation([]).on("drag", lambda: None)


def test_charge_repels():
    a, b = placed("a", 0, 0), placed("b", 10, 0)
    sim = ForceSimulation([a, b], seed=0)
    sim.set_force("charge", ManyBodyForce(-30.0))
    sim.tick()
    assert gap(a, b) > 10.0
    assert a.x < 0.0 < b.x - 10.0


def test_coincident_nodes_are_separated():
    a, b = placed("a", 5, 5), placed("b", 5, 5)
    sim = ForceSimulation([a, b], seed=0)
    sim.set_force("charge", ManyBodyForce(-30.0))
    sim.tick(3)
    assert gap(a, b) > 0.0


def test_link_pulls_stretched_pair_together():
    a, b = placed("a", 0, 0), placed("b", 200, 0)
    sim = ForceSimulation([a, b], seed=0)
    sim.set_force("link", LinkForce([Edge("e", "a", "b")], distance=30.0))
    sim.tick()
    assert gap(a, b) < 200.0


def test_link_force_ignores_dangling_edges():
    a, b = placed("a", 0, 0), placed("b", 50, 0)
    link = LinkForce([Edge("e", "a", "b"), Edge("x", "a", "missing")], distance=lambda e: 10.0)
    ForceSimulation([a, b]).set_force("link", link)
    assert [e.id for e in link.links] == ["e"]
    assert link._k.tolist() == [1.0]


def test_collision_pushes_overlapping_nodes_apart():
    a, b = placed("a", 0, 0), placed("b", 1, 0)
    sim = ForceSimulation([a, b], seed=0)
    sim.set_force("collision", CollideForce(5.0))
    sim.tick()
    assert gap(a, b) > 1.0


def test_center_translates_mean():
    a, b = placed("a", 0, 0), placed("b", 10, 20)
    sim = ForceSimulation([a, b])
    sim.set_force("center", CenterForce((100.0, 100.0)))
    sim.tick()
    assert (a.x + b.x) / 2 == pytest.approx(100.0)
    assert (a.y + b.y) / 2 == pytest.approx(100.0)
    assert gap(a, b) == pytest.approx(math.hypot(10, 20))


def test_radial_pulls_toward_ring():
    inner = placed("in", 10, 0)
    outer = placed("out", 500, 0)
    sim = ForceSimulation([inner, outer])
    sim.set_force("radial", RadialForce(100.0, (0.0, 0.0), strength=0.3))
    sim.tick()
    assert 10.0 < inner.x < 100.0
    assert 100.0 < outer.x < 500.0


def test_radial_handles_node_at_centre():
    node = placed("c", 0, 0)
    sim = ForceSimulation([node])
    sim.set_force("radial", RadialForce(150.0, (0.0, 0.0)))
    sim.tick()
    assert math.isfinite(node.x) and math.isfinite(node.y)


def test_position_force_per_node_target():
    a, b = placed("a", 0, 0, ntype="author"), placed("b", 0, 0, ntype="book")
    targets = {"author": 100.0, "book": -100.0}
    sim = ForceSimulation([a, b])
    sim.set_force("cluster", PositionForce(0, lambda n: targets[n.type.value], 0.1, name="cluster"))
    sim.tick()
    assert a.x > 0.0 > b.x
    assert a.y == b.y == 0.0


def test_position_force_ignores_missing_axis():
    node = placed("a", 1, 1)
    sim = ForceSimulation([node])
    sim.set_force("z", PositionForce(2, 50.0))
    sim.tick()
    assert (node.x, node.y) == (1.0, 1.0)


def test_pins_hold_against_forces():
    a, b = placed("a", 0, 0), placed("b", 5, 0)
    a.fx, a.fy = 0.0, 0.0
    sim = ForceSimulation([a, b], seed=0)
    sim.set_force("charge", ManyBodyForce(-100.0))
    sim.tick(20)
    assert (a.x, a.y) == (0.0, 0.0)
    assert (a.vx, a.vy) == (0.0, 0.0)
    assert b.x > 5.0


def test_removing_a_force():
    sim = ForceSimulation([])
    sim.set_force("charge", ManyBodyForce())
    sim.set_force("charge", None)
    sim.set_force("never-there", None)
    assert sim.force_names() == []


def test_cooling_reaches_end_once():
    ends = []
    sim = ForceSimulation([placed("a", 0, 0)])
    sim.on("end", lambda: ends.append(sim.alpha))
    steps = sim.run(1000)
    assert 250 < steps < 350
    assert len(ends) == 1 and ends[0] < sim.alpha_min
    assert not sim.is_running
    assert sim.run() == 0


def test_alpha_target_keeps_simulation_warm():
    sim = ForceSimulation([placed("a", 0, 0)])
    sim.alpha_target = 0.3
    assert sim.run(1000) == 1000
    assert sim.alpha == pytest.approx(0.3, abs=1e-3)


def test_empty_simulation_still_cools():
    sim = ForceSimulation([])
    sim.tick(10)
    assert sim.alpha < 1.0


def test_host_reset_node_is_reseeded():
    a, b = placed("a", 0, 0), placed("b", 30, 0)
    sim = ForceSimulation([a, b])
    b.x = b.y = None
    sim.tick()
    assert b.x is not None and np.isfinite(b.x)


def test_set_dimensions_adds_depth_axis():
    node = placed("a", 1, 2)
    sim = ForceSimulation([node])
    sim.set_dimensions(3)
    assert node.z is not None
    sim.tick()
    assert math.isfinite(node.z)

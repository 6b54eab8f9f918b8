import numpy as np
import pytest

from mhsurvey import aggregation as agg
from mhsurvey.layout import force, placeholder


@pytest.fixture
def state(sample_records):
    net = agg.network_nodes(sample_records)
    return force.initial_state(net["nodes"], net["links"])


def test_advance_does_not_mutate_state(state):
    before = state.positions.copy()
    nxt = force.advance(state)
    assert np.array_equal(state.positions, before)
    assert state.steps == 0
    assert nxt.steps == 1
    assert nxt.alpha < state.alpha


def test_advance_is_deterministic(state):
    a = force.advance(force.advance(state))
    b = force.advance(force.advance(state))
    assert np.array_equal(a.positions, b.positions)


def test_pinned_node_does_not_move(state):
    pinned = force.pin(state, "Diagnosis", 10.0, 20.0)
    out = force.simulate(pinned, max_steps=50)
    i = out.index("Diagnosis")
    assert tuple(out.positions[i]) == (10.0, 20.0)


def test_release_frees_node(state):
    pinned = force.pin(state, "Diagnosis", 10.0, 20.0)
    released = force.release(pinned, "Diagnosis")
    assert not released.pinned.any()


def test_pin_unknown_node(state):
    with pytest.raises(KeyError):
        force.pin(state, "Nope", 0, 0)


def test_simulation_converges(state):
    out = force.simulate(state, max_steps=1000)
    assert force.converged(out)
    assert out.steps <= 1000


def test_simulate_respects_step_budget(state):
    assert force.simulate(state, max_steps=5).steps == 5


def test_network_layout(sample_records):
    out = force.network_layout(agg.network_nodes(sample_records), max_steps=400, scale=5)
    assert len(out["nodes"]) == 5
    assert len(out["links"]) == 5
    assert out["scale"] == 2.0
    assert all(np.isfinite([n["x"], n["y"]]).all() for n in out["nodes"])


def test_network_layout_without_data():
    assert force.network_layout({}) == placeholder()

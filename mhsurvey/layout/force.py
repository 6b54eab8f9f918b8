"""
Force-directed layout for the mental-health network graph.

The simulation is an explicit state machine: ``advance(state, dt)``
returns the next ``ForceState`` and never touches the old one, and
``simulate`` just calls it until ``converged``. Dragging a node in the
UI maps to ``pin`` / ``release``.

Forces follow d3-force: n-body repulsion, springs along links pulling
towards ``link_distance`` and a centering shift that keeps the mean
position on the canvas centre. Everything is deterministic: coincident
nodes are simply not pushed apart instead of being jiggled randomly.
"""
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from . import placeholder
from .scales import clamp, sqrt_scale

MIN_SCALE, MAX_SCALE = 0.1, 2.0


@dataclass(frozen=True)
class ForceParams:
    repulsion: float = -30.0
    distance_min: float = 1.0
    link_distance: float = 30.0
    center_strength: float = 1.0
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    alpha_target: float = 0.0
    # a step moving no node further than this counts as settled
    settle_distance: float = 1e-3
    reheat_alpha: float = 0.3


@dataclass(frozen=True, eq=False)
class ForceState:
    ids: Tuple[str, ...]
    positions: np.ndarray
    velocities: np.ndarray
    radii: np.ndarray
    links: Tuple[Tuple[int, int], ...]
    pinned: np.ndarray
    center: Tuple[float, float]
    alpha: float = 1.0
    steps: int = 0
    last_shift: float = math.inf
    params: ForceParams = field(default_factory=ForceParams)

    def index(self, node_id: str) -> int:
        try:
            return self.ids.index(node_id)
        except ValueError:
            raise KeyError(f"unknown node: {node_id}") from None


def initial_state(
    nodes: Sequence[Mapping[str, Any]],
    links: Sequence[Mapping[str, Any]],
    width: float = 100,
    height: float = 75,
    margin: float = 3,
    radius_range=(3, 15),
    params: Optional[ForceParams] = None,
) -> ForceState:
    """
    Nodes start evenly spaced on a circle around the canvas centre, far
    enough out (30 + largest radius) that the big ones do not overlap.
    """
    ids = tuple(n["id"] for n in nodes)
    counts = np.array([n["count"] for n in nodes], dtype=float)
    size = sqrt_scale(counts.max() if len(counts) else 0, radius_range)
    radii = np.array([size(c) for c in counts])

    cx, cy = (width - 2 * margin) / 2, (height - 2 * margin) / 2
    ring = 30 + (radii.max() if len(radii) else 0)
    angles = np.arange(len(ids)) / max(len(ids), 1) * 2 * math.pi
    positions = np.column_stack((cx + ring * np.cos(angles), cy + ring * np.sin(angles)))

    index = {node_id: i for i, node_id in enumerate(ids)}
    edges = tuple((index[l["source"]], index[l["target"]]) for l in links)

    return ForceState(
        ids=ids,
        positions=positions,
        velocities=np.zeros_like(positions),
        radii=radii,
        links=edges,
        pinned=np.zeros(len(ids), dtype=bool),
        center=(cx, cy),
        params=params or ForceParams(),
    )


def _link_forces(state: ForceState, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
    degree = np.zeros(len(state.ids))
    for s, t in state.links:
        degree[s] += 1
        degree[t] += 1
    for s, t in state.links:
        delta = (pos[t] + vel[t]) - (pos[s] + vel[s])
        dist = float(np.hypot(*delta))
        if dist == 0:
            continue
        strength = 1 / min(degree[s], degree[t])
        delta = delta * ((dist - state.params.link_distance) / dist * alpha * strength)
        bias = degree[s] / (degree[s] + degree[t])
        vel[t] -= delta * bias
        vel[s] += delta * (1 - bias)


def _repulsion(state: ForceState, pos: np.ndarray, vel: np.ndarray, alpha: float) -> None:
    diff = pos[np.newaxis, :, :] - pos[:, np.newaxis, :]
    dist2 = (diff ** 2).sum(axis=2)
    floor2 = state.params.distance_min ** 2
    dist2 = np.where(dist2 < floor2, np.sqrt(floor2 * dist2), dist2)
    with np.errstate(divide="ignore", invalid="ignore"):
        weight = np.where(dist2 > 0, state.params.repulsion * alpha / dist2, 0.0)
    np.fill_diagonal(weight, 0.0)
    vel += (diff * weight[:, :, np.newaxis]).sum(axis=1)


def advance(state: ForceState, dt: float = 1.0) -> ForceState:
    """One relaxation step. Pinned nodes stay where they were pinned."""
    p = state.params
    alpha = state.alpha + (p.alpha_target - state.alpha) * (1 - (1 - p.alpha_decay) ** dt)
    pos = state.positions.copy()
    vel = state.velocities.copy()

    _link_forces(state, pos, vel, alpha)
    _repulsion(state, pos, vel, alpha)

    free = ~state.pinned
    shift = (np.array(state.center) - pos.mean(axis=0)) * p.center_strength
    pos[free] += shift

    vel[free] *= (1 - p.velocity_decay) ** dt
    vel[state.pinned] = 0.0
    moved = vel * dt
    new_pos = pos + moved
    new_pos[state.pinned] = state.positions[state.pinned]

    displacement = np.hypot(*(new_pos - state.positions).T)
    return replace(
        state,
        positions=new_pos,
        velocities=vel,
        alpha=alpha,
        steps=state.steps + 1,
        last_shift=float(displacement.max()) if len(displacement) else 0.0,
    )


def converged(state: ForceState) -> bool:
    return state.alpha < state.params.alpha_min or state.last_shift < state.params.settle_distance


def simulate(state: ForceState, max_steps: int = 300, dt: float = 1.0) -> ForceState:
    for _ in range(max_steps):
        if converged(state):
            break
        state = advance(state, dt)
    return state


def pin(state: ForceState, node_id: str, x: float, y: float) -> ForceState:
    """Fix a node where the user dropped it and reheat the simulation."""
    i = state.index(node_id)
    positions = state.positions.copy()
    velocities = state.velocities.copy()
    pinned = state.pinned.copy()
    positions[i] = (x, y)
    velocities[i] = 0.0
    pinned[i] = True
    return replace(
        state,
        positions=positions,
        velocities=velocities,
        pinned=pinned,
        alpha=max(state.alpha, state.params.reheat_alpha),
        last_shift=math.inf,
    )


def release(state: ForceState, node_id: str) -> ForceState:
    pinned = state.pinned.copy()
    pinned[state.index(node_id)] = False
    return replace(state, pinned=pinned, last_shift=math.inf)


def network_layout(
    network: Mapping[str, Any],
    width: float = 100,
    height: float = 75,
    margin: float = 3,
    scale: float = 1.0,
    pinned: Optional[Mapping[str, Sequence[float]]] = None,
    max_steps: int = 300,
) -> Dict[str, Any]:
    """Relax the network graph and return node/link coordinates."""
    if not network or not network.get("nodes"):
        return placeholder()

    state = initial_state(network["nodes"], network["links"], width, height, margin)
    for node_id, (x, y) in (pinned or {}).items():
        state = pin(state, node_id, x, y)
    state = simulate(state, max_steps=max_steps)

    by_id = {n["id"]: n for n in network["nodes"]}
    nodes = [
        {
            "id": node_id,
            "label": by_id[node_id].get("label", node_id),
            "group": by_id[node_id].get("group"),
            "count": by_id[node_id]["count"],
            "x": float(state.positions[i, 0]),
            "y": float(state.positions[i, 1]),
            "r": float(state.radii[i]),
            "pinned": bool(state.pinned[i]),
        }
        for i, node_id in enumerate(state.ids)
    ]
    links = []
    for (s, t), link in zip(state.links, network["links"]):
        links.append({
            "source": state.ids[s],
            "target": state.ids[t],
            "value": link.get("value"),
            "x1": float(state.positions[s, 0]),
            "y1": float(state.positions[s, 1]),
            "x2": float(state.positions[t, 0]),
            "y2": float(state.positions[t, 1]),
        })

    return {
        "empty": False,
        "width": width,
        "height": height,
        "translate": [margin, margin],
        "scale": clamp(scale, MIN_SCALE, MAX_SCALE),
        "alpha": state.alpha,
        "steps": state.steps,
        "converged": converged(state),
        "nodes": nodes,
        "links": links,
    }

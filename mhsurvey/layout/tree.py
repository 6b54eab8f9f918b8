from typing import Any, Dict, List, Optional

from . import placeholder
from .scales import clamp, sqrt_scale

MIN_SCALE, MAX_SCALE = 0.5, 2.0


class _Node:
    __slots__ = ("id", "name", "value", "percentage", "depth", "parent", "children", "x")

    def __init__(self, data: dict, depth: int, parent: Optional["_Node"]):
        self.name = data["name"]
        self.id = self.name if parent is None else f"{parent.id}/{self.name}"
        self.value = data.get("value")
        self.percentage = data.get("percentage")
        self.depth = depth
        self.parent = parent
        self.children = [_Node(c, depth + 1, self) for c in data.get("children", ())]
        self.x = 0.0

    def walk(self):
        yield self
        for c in self.children:
            yield from c.walk()


def _separation(a: _Node, b: _Node) -> float:
    return 1.0 if a.parent is b.parent else 2.0


def _place(node: _Node, leaves: List[_Node]) -> None:
    """Leaves left to right at their separation; parents centred over children."""
    if not node.children:
        if leaves:
            node.x = leaves[-1].x + _separation(leaves[-1], node)
        leaves.append(node)
        return
    for c in node.children:
        _place(c, leaves)
    node.x = (node.children[0].x + node.children[-1].x) / 2


def tree_layout(
    hierarchy: Dict[str, Any],
    width: float = 100,
    height: float = 75,
    margin: float = 3,
    scale: float = 1.0,
    radius_range=(3, 8),
) -> Dict[str, Any]:
    """
    Horizontal tree: depth runs left to right, siblings are evenly spaced
    top to bottom. Valued nodes get a radius growing with sqrt(value).
    """
    if not hierarchy or not hierarchy.get("children"):
        return placeholder()

    root = _Node(hierarchy, 0, None)
    leaves: List[_Node] = []
    _place(root, leaves)
    nodes = list(root.walk())

    breadth = height - 2 * margin
    depth_extent = width - 2 * margin
    left, right = leaves[0], leaves[-1]
    s = _separation(left, right) / 2
    tx = s - left.x
    kx = breadth / (right.x + s + tx)
    max_depth = max(n.depth for n in nodes) or 1
    ky = depth_extent / max_depth

    max_value = max((n.value for n in nodes if n.value is not None), default=0)
    size = sqrt_scale(max_value, radius_range)

    coords = {}
    laid = []
    for n in nodes:
        px, py = n.depth * ky, (n.x + tx) * kx
        coords[n.id] = (px, py)
        laid.append({
            "id": n.id,
            "name": n.name,
            "depth": n.depth,
            "value": n.value,
            "percentage": n.percentage,
            "x": px,
            "y": py,
            "r": size(n.value) if n.value is not None else float(radius_range[0]),
            "leaf": not n.children,
        })

    links = []
    for n in nodes:
        if n.parent is None:
            continue
        (x1, y1), (x2, y2) = coords[n.parent.id], coords[n.id]
        links.append({"source": n.parent.id, "target": n.id, "x1": x1, "y1": y1, "x2": x2, "y2": y2})

    return {
        "empty": False,
        "width": width,
        "height": height,
        "translate": [margin, margin],
        "scale": clamp(scale, MIN_SCALE, MAX_SCALE),
        "nodes": laid,
        "links": links,
    }

"""Force-directed layout engine.

A headless rendition of d3-force: a link spring toward a target distance, a
many-body charge, a centering translation and a collision radius, integrated
with velocity decay under a cooling ``alpha`` ("liveliness"). Pinned
``fx``/``fy`` coordinates, tick listeners and a drag controller complete the
lifecycle. The link structure and the degree weights come from a networkx
multigraph, collision candidates from a scipy KD-tree. The interactive page
runs d3-force itself with the same forces.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import networkx as nx
import numpy as np
from scipy.spatial import KDTree

from netguide.config import LayoutConfig
from netguide.models import Edge, Endpoint, Node, Resolved, Unresolved

logger = logging.getLogger(__name__)

# Phyllotaxis seeding, same spiral d3-force uses for nodes without a position.
INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

COLLIDE_STRENGTH = 0.7
CHARGE_DISTANCE_MIN = 1.0
JIGGLE = 1e-6


@dataclass
class SimNode:
    """A node's live layout state. Exists only while a simulation runs."""
    id: str
    index: int
    x: float = math.nan
    y: float = math.nan
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


@dataclass
class SimLink:
    source: Endpoint
    target: Endpoint
    index: int


# --- Forces ---


@dataclass
class LinkForce:
    distance: float
    id_key: str = "id"


@dataclass
class ManyBodyForce:
    strength: float


@dataclass
class CenterForce:
    x: float
    y: float


@dataclass
class CollideForce:
    radius: float


class ForceSimulation:
    """Mutable layout of one node list and one edge list.

    Links are resolved by node id at construction: endpoints naming a known
    node become ``Resolved``, the rest stay ``Unresolved`` and are ignored by
    the physics.
    """

    def __init__(
        self,
        nodes: list[Node],
        links: list[Edge],
        config: LayoutConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.seed = seed

        self.nodes = [SimNode(id=node.id, index=i) for i, node in enumerate(nodes)]
        self._by_id: dict[str, SimNode] = {}
        for sim_node in self.nodes:
            self._by_id.setdefault(sim_node.id, sim_node)

        self.forces: dict[str, Any] = {
            "link": LinkForce(distance=self.config.link_distance),
            "charge": ManyBodyForce(strength=self.config.charge_strength),
            "center": CenterForce(x=self.config.width / 2, y=self.config.height / 2),
            "collision": CollideForce(radius=self.config.collision_radius),
        }

        self.links = [
            SimLink(source=self._resolve(edge.source), target=self._resolve(edge.target), index=i)
            for i, edge in enumerate(links)
        ]
        unresolved = sum(
            1 for link in self.links
            if isinstance(link.source, Unresolved) or isinstance(link.target, Unresolved)
        )
        if unresolved:
            logger.warning("%d link(s) reference unknown nodes and will not be laid out", unresolved)

        self.alpha = 1.0
        self.alpha_min = self.config.alpha_min
        self.alpha_decay = self.config.alpha_decay
        self.velocity_decay = self.config.velocity_decay
        self._alpha_target = 0.0
        self._running = True
        self._listeners: list[Callable[[], None]] = []

        self._rng = np.random.default_rng(seed)
        self._graph = self._build_graph()
        self._index_links()
        self._place_initial(nodes)

    # --- Lookup ---

    def force(self, name: str) -> Any:
        return self.forces.get(name)

    def find(self, node_id: str) -> SimNode | None:
        return self._by_id.get(node_id)

    def _resolve(self, node_id: str) -> Endpoint:
        sim_node = self._by_id.get(node_id)
        if sim_node is None:
            return Unresolved(node_id)
        return Resolved(sim_node)

    def _build_graph(self) -> nx.MultiGraph:
        # Multigraph so parallel links each pull and count toward degree.
        graph = nx.MultiGraph()
        graph.add_nodes_from(n.index for n in self.nodes)
        for link in self.links:
            if isinstance(link.source, Resolved) and isinstance(link.target, Resolved):
                graph.add_edge(link.source.node.index, link.target.node.index)
        return graph

    def _index_links(self) -> None:
        """Endpoint index arrays plus per-link strength and bias for the spring."""
        pairs = [(u, v) for u, v in self._graph.edges() if u != v]
        degree = dict(self._graph.degree())
        self._link_src = np.array([u for u, _ in pairs], dtype=int)
        self._link_tgt = np.array([v for _, v in pairs], dtype=int)
        src_count = np.array([degree[u] for u, _ in pairs], dtype=float)
        tgt_count = np.array([degree[v] for _, v in pairs], dtype=float)
        self._link_strength = 1 / np.minimum(src_count, tgt_count)
        self._link_bias = src_count / (src_count + tgt_count)

    def _place_initial(self, nodes: list[Node]) -> None:
        """Keep positions the upload supplied; spiral everything else around the center."""
        center = self.forces["center"]
        for sim_node, node in zip(self.nodes, nodes):
            extra = node.model_extra or {}
            x, y = extra.get("x"), extra.get("y")
            if _is_number(x) and _is_number(y):
                sim_node.x, sim_node.y = float(x), float(y)
                continue
            radius = INITIAL_RADIUS * math.sqrt(0.5 + sim_node.index)
            angle = sim_node.index * INITIAL_ANGLE
            sim_node.x = center.x + radius * math.cos(angle)
            sim_node.y = center.y + radius * math.sin(angle)

    # --- Lifecycle ---

    @property
    def running(self) -> bool:
        return self._running

    @property
    def alpha_target(self) -> float:
        return self._alpha_target

    @alpha_target.setter
    def alpha_target(self, value: float) -> None:
        self._alpha_target = value

    def on_tick(self, callback: Callable[[], None]) -> "ForceSimulation":
        self._listeners.append(callback)
        return self

    def restart(self) -> "ForceSimulation":
        self._running = True
        return self

    def stop(self) -> "ForceSimulation":
        self._running = False
        return self

    def run(self, max_ticks: int | None = None) -> int:
        """Tick until alpha cools below alpha_min, or max_ticks is reached.

        Returns the number of ticks run. Stands in for the animation-frame
        timer a browser would drive the simulation with.
        """
        limit = self.config.max_ticks if max_ticks is None else max_ticks
        ticks = 0
        while self._running and ticks < limit:
            self.tick()
            ticks += 1
            if self.alpha < self.alpha_min:
                self._running = False
                logger.debug("Simulation cooled after %d ticks", ticks)
        return ticks

    def tick(self) -> None:
        """Advance one step and notify tick listeners."""
        self.alpha += (self._alpha_target - self.alpha) * self.alpha_decay
        if self.nodes:
            self._step()
        for callback in self._listeners:
            callback()

    # --- Physics ---

    def _step(self) -> None:
        for n in self.nodes:
            if n.fx is not None:
                n.x = n.fx
            if n.fy is not None:
                n.y = n.fy
        positions = np.array([[n.x, n.y] for n in self.nodes], dtype=float)
        velocities = np.array([[n.vx, n.vy] for n in self.nodes], dtype=float)

        velocities += self._link_impulse(positions + velocities)
        velocities += self._charge_impulse(positions)
        velocities += self._collision_impulse(positions + velocities)

        keep = 1 - self.velocity_decay
        for n, (vx, vy) in zip(self.nodes, velocities):
            if n.fx is None:
                n.vx = vx * keep
                n.x += n.vx
            else:
                n.x, n.vx = n.fx, 0.0
            if n.fy is None:
                n.vy = vy * keep
                n.y += n.vy
            else:
                n.y, n.vy = n.fy, 0.0

        self._recenter()

    def _link_impulse(self, predicted: np.ndarray) -> np.ndarray:
        """Spring each linked pair toward the link distance.

        Strength is 1 / min(degree) of the two ends, and the better-connected
        end moves less.
        """
        impulse = np.zeros_like(predicted)
        if not len(self._link_src):
            return impulse
        delta = predicted[self._link_tgt] - predicted[self._link_src]
        dist = self._spread_coincident(delta)
        scale = (dist - self.forces["link"].distance) / dist * self.alpha * self._link_strength
        delta *= scale[:, None]
        np.add.at(impulse, self._link_tgt, -delta * self._link_bias[:, None])
        np.add.at(impulse, self._link_src, delta * (1 - self._link_bias)[:, None])
        return impulse

    def _charge_impulse(self, positions: np.ndarray) -> np.ndarray:
        """Pairwise many-body force, falling off with distance. Negative strength repels."""
        impulse = np.zeros_like(positions)
        strength = self.forces["charge"].strength
        if len(positions) < 2 or strength == 0:
            return impulse
        i, j = np.triu_indices(len(positions), k=1)
        delta = positions[j] - positions[i]
        dist = self._spread_coincident(delta)
        # Squared distance, softened below CHARGE_DISTANCE_MIN.
        l2 = np.where(dist < CHARGE_DISTANCE_MIN, dist * CHARGE_DISTANCE_MIN, dist * dist)
        pull = delta * (strength * self.alpha / l2)[:, None]
        np.add.at(impulse, i, pull)
        np.add.at(impulse, j, -pull)
        return impulse

    def _collision_impulse(self, predicted: np.ndarray) -> np.ndarray:
        """Push apart nodes whose collision circles overlap."""
        impulse = np.zeros_like(predicted)
        radius = self.forces["collision"].radius
        if len(predicted) < 2 or radius <= 0:
            return impulse
        pairs = KDTree(predicted).query_pairs(2 * radius, output_type="ndarray")
        if not len(pairs):
            return impulse
        i, j = pairs[:, 0], pairs[:, 1]
        delta = predicted[i] - predicted[j]
        dist = self._spread_coincident(delta)
        overlap = np.clip(2 * radius - dist, 0.0, None)
        push = delta * (overlap / dist * COLLIDE_STRENGTH / 2)[:, None]
        np.add.at(impulse, i, push)
        np.add.at(impulse, j, -push)
        return impulse

    def _spread_coincident(self, delta: np.ndarray) -> np.ndarray:
        """Give zero-length offsets a tiny random direction. Returns the lengths.

        Without this, nodes sharing a position get identical forces and never
        separate.
        """
        dist = np.linalg.norm(delta, axis=-1)
        coincident = dist == 0
        if coincident.any():
            delta[coincident] = (self._rng.random((int(coincident.sum()), 2)) - 0.5) * JIGGLE
            dist = np.linalg.norm(delta, axis=-1)
        return dist

    def _recenter(self) -> None:
        free = [n for n in self.nodes if not n.pinned]
        if not free:
            return
        center = self.forces["center"]
        sx = sum(n.x for n in self.nodes) / len(self.nodes) - center.x
        sy = sum(n.y for n in self.nodes) / len(self.nodes) - center.y
        for n in free:
            n.x -= sx
            n.y -= sy


class DragController:
    """Pointer-drag handling: pin while dragging, keep the layout lively."""

    def __init__(self, simulation: ForceSimulation) -> None:
        self.simulation = simulation
        self._active: set[int] = set()

    @property
    def active(self) -> int:
        return len(self._active)

    def start(self, node: SimNode) -> None:
        if not self._active:
            self.simulation.alpha_target = self.simulation.config.alpha_target_drag
            self.simulation.restart()
        self._active.add(node.index)
        node.fx, node.fy = node.x, node.y

    def move(self, node: SimNode, x: float, y: float) -> None:
        node.fx, node.fy = x, y

    def end(self, node: SimNode) -> None:
        self._active.discard(node.index)
        if not self._active:
            self.simulation.alpha_target = 0.0
        node.fx = node.fy = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

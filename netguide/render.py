"""Render loop: binds a dataset and its encodings to a per-variant scene.

Each variant (plain, annotated) gets its own deep copy of the dataset, its own
ForceSimulation and its own Scene. Every tick rewrites line endpoints from the
live resolved nodes and circle centers from node positions.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from netguide.config import Config
from netguide.degrees import compute_degrees
from netguide.encoding import encode
from netguide.layout import DragController, ForceSimulation
from netguide.models import Dataset, Endpoint, Guideline, Resolved, Variant, endpoint_id

logger = logging.getLogger(__name__)


@dataclass
class Line:
    source_id: str
    target_id: str
    stroke_width: float
    x1: float = math.nan
    y1: float = math.nan
    x2: float = math.nan
    y2: float = math.nan


@dataclass
class Circle:
    node_id: str
    r: float
    fill: str
    stroke: str
    stroke_width: float
    title: str
    cx: float = math.nan
    cy: float = math.nan


@dataclass
class Scene:
    variant: Variant
    width: int
    height: int
    lines: list[Line] = field(default_factory=list)
    circles: list[Circle] = field(default_factory=list)
    frames: int = 0


class VariantView:
    """One side of the comparison: dataset copy, simulation, drag and scene."""

    def __init__(
        self,
        dataset: Dataset,
        variant: Variant,
        guidelines: Iterable[Guideline],
        config: Config,
        seed: int | None = None,
    ) -> None:
        self.variant = variant
        self.dataset = dataset.model_copy(deep=True)
        self.guidelines = frozenset(guidelines)
        self.degrees = compute_degrees(self.dataset)
        self.simulation = ForceSimulation(
            self.dataset.nodes, self.dataset.links, config.layout, seed=seed,
        )
        self.drag = DragController(self.simulation)
        self.scene = self._build_scene(config)
        self.simulation.on_tick(self.redraw)
        self.redraw()

    def _build_scene(self, config: Config) -> Scene:
        enc = config.encoding
        scene = Scene(variant=self.variant, width=config.layout.width, height=config.layout.height)
        for link in self.simulation.links:
            scene.lines.append(Line(
                source_id=endpoint_id(link.source),
                target_id=endpoint_id(link.target),
                stroke_width=enc.link_stroke_width,
            ))
        for node in self.simulation.nodes:
            style = encode(node, node.index, self.degrees, self.guidelines, self.variant, enc)
            scene.circles.append(Circle(
                node_id=node.id,
                r=style.radius,
                fill=style.fill,
                stroke=enc.stroke,
                stroke_width=enc.stroke_width,
                title=f"Node: {node.id}\nDegree: {self.degrees.get(node.id, 0)}",
            ))
        return scene

    def redraw(self) -> None:
        """Copy live coordinates into the scene."""
        for line, link in zip(self.scene.lines, self.simulation.links):
            line.x1, line.y1 = _coords(link.source)
            line.x2, line.y2 = _coords(link.target)
        for circle, node in zip(self.scene.circles, self.simulation.nodes):
            circle.cx, circle.cy = node.x, node.y
        self.scene.frames += 1


def _coords(endpoint: Endpoint) -> tuple[float, float]:
    # A link to a node that does not exist has no position to draw.
    if isinstance(endpoint, Resolved):
        return endpoint.node.x, endpoint.node.y
    return math.nan, math.nan


def render_views(
    dataset: Dataset,
    guidelines: Iterable[Guideline],
    config: Config,
    seed: int | None = None,
) -> dict[Variant, VariantView]:
    """Build independent plain and annotated views of the same dataset."""
    guidelines = frozenset(guidelines)
    views = {
        variant: VariantView(dataset, variant, guidelines, config, seed=seed)
        for variant in (Variant.PLAIN, Variant.ANNOTATED)
    }
    logger.debug(
        "Rendered %d nodes / %d edges with guidelines %s",
        len(dataset.nodes), len(dataset.links),
        sorted(g.value for g in guidelines),
    )
    return views


def run_views(views: Iterable[VariantView], max_ticks: int | None = None) -> int:
    """Interleave ticks of several simulations on this thread until all cool.

    Returns the number of rounds run.
    """
    simulations = [view.simulation for view in views]
    if not simulations:
        return 0
    limit = simulations[0].config.max_ticks if max_ticks is None else max_ticks
    rounds = 0
    while rounds < limit and any(sim.running for sim in simulations):
        for sim in simulations:
            if sim.running:
                sim.run(max_ticks=1)
        rounds += 1
    return rounds

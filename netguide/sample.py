"""Sample small-world network shown when nothing has been uploaded."""

import logging
import random

from netguide.config import SampleConfig
from netguide.models import Dataset, Edge, Node

logger = logging.getLogger(__name__)

SAMPLE_NAME = "Sample Small-World Network"


def generate_sample(
    seed: int | None = None,
    rng: random.Random | None = None,
    config: SampleConfig | None = None,
) -> Dataset:
    """Build a ring of nodes "0".."n-1" with a few random long-range edges.

    Every node i links to (i + 1) mod n. With probability
    extra_edge_probability it also links to a uniformly random node, unless
    that node is itself.

    Args:
        seed: Seed for a private RNG. Ignored when rng is given.
        rng: RNG to draw from, for callers that share one.
        config: Node count and extra-edge probability. Defaults apply if None.
    """
    config = config or SampleConfig()
    if rng is None:
        rng = random.Random(seed if seed is not None else config.seed)

    n = config.node_count
    nodes = [Node(id=str(i)) for i in range(n)]
    links: list[Edge] = []

    for i in range(n):
        links.append(Edge(source=str(i), target=str((i + 1) % n)))

        if rng.random() < config.extra_edge_probability:
            target = rng.randrange(n)
            if target != i:
                links.append(Edge(source=str(i), target=str(target)))

    logger.debug("Generated sample: %d nodes, %d edges", len(nodes), len(links))
    return Dataset(nodes=nodes, links=links)

"""Degree annotation: how many edge ends touch each node."""

from collections import Counter
from typing import Any

from netguide.models import endpoint_id


def compute_degrees(dataset: Any) -> dict[str, int]:
    """Count incident edge ends per node id.

    Works on anything with ``nodes`` (objects with ``id``) and ``links``
    (objects with ``source``/``target``), so both an ingested Dataset and a
    running simulation's resolved links are accepted.

    Every node starts at 0. Each edge adds 1 to its source and 1 to its
    target, so a self-loop adds 2. Ids only referenced by edges get an entry.
    """
    degrees: Counter[str] = Counter({node.id: 0 for node in dataset.nodes})
    for link in dataset.links:
        degrees[endpoint_id(link.source)] += 1
        degrees[endpoint_id(link.target)] += 1
    return dict(degrees)

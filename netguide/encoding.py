"""Encoding policy — maps active guidelines to per-node radius and fill."""

from collections.abc import Iterable
from typing import Any

from netguide.config import EncodingConfig
from netguide.models import Guideline, NodeStyle, Variant

_DEFAULTS = EncodingConfig()

PALETTE: tuple[str, ...] = tuple(_DEFAULTS.palette)
NEUTRAL_COLOR = _DEFAULTS.neutral_color


def parse_guidelines(tags: Iterable[str]) -> frozenset[Guideline]:
    """Turn guideline names into a set, rejecting anything outside the vocabulary."""
    active: set[Guideline] = set()
    for tag in tags:
        tag = tag.strip().lower()
        if not tag:
            continue
        try:
            active.add(Guideline(tag))
        except ValueError:
            valid = ", ".join(g.value for g in Guideline)
            raise ValueError(f"Unknown guideline '{tag}' (expected one of: {valid})") from None
    return frozenset(active)


def encode(
    node: Any,
    index: int,
    degrees: dict[str, int],
    guidelines: Iterable[Guideline],
    variant: Variant,
    config: EncodingConfig | None = None,
) -> NodeStyle:
    """Compute the radius and fill color for one node.

    Size and color are decided independently. Only the annotated variant
    applies guidelines; crossings and clustering never change the encoding.
    """
    config = config or _DEFAULTS
    active = set(guidelines)
    annotated = variant == Variant.ANNOTATED

    radius = config.base_radius
    if annotated and Guideline.SIZE in active:
        radius = config.base_radius + degrees.get(node.id, 0) * config.degree_scale

    fill = config.neutral_color
    if annotated and Guideline.COLOR in active:
        fill = config.palette[index % len(config.palette)]

    return NodeStyle(radius=radius, fill=fill)

"""Static SVG snapshot of the plain and annotated scenes, side by side."""

import logging
import math
from collections.abc import Iterable
from pathlib import Path

from netguide.output import esc as _esc
from netguide.render import Scene, VariantView

logger = logging.getLogger(__name__)

PANEL_GAP = 20
TITLE_HEIGHT = 24
LINK_COLOR = "#999"

PANEL_TITLES = {
    "plain": "Without Guidelines",
    "annotated": "With Guidelines",
}


def _num(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


def scene_to_svg(scene: Scene, offset_x: float = 0.0) -> str:
    """Render one scene as an SVG <g> group."""
    parts = [f'<g transform="translate({_num(offset_x)},{TITLE_HEIGHT})">']
    parts.append(
        f'<rect width="{scene.width}" height="{scene.height}" fill="none" stroke="#ddd"/>'
    )

    skipped = 0
    parts.append(f'<g class="links" stroke="{LINK_COLOR}" stroke-opacity="0.6">')
    for line in scene.lines:
        coords = (line.x1, line.y1, line.x2, line.y2)
        if not all(math.isfinite(c) for c in coords):
            skipped += 1
            continue
        parts.append(
            f'<line x1="{_num(line.x1)}" y1="{_num(line.y1)}" '
            f'x2="{_num(line.x2)}" y2="{_num(line.y2)}" stroke-width="{_num(line.stroke_width)}"/>'
        )
    parts.append("</g>")
    if skipped:
        logger.debug("Dropped %d line(s) with a missing endpoint from %s snapshot", skipped, scene.variant.value)

    parts.append('<g class="nodes">')
    for c in scene.circles:
        if not (math.isfinite(c.cx) and math.isfinite(c.cy)):
            continue
        parts.append(
            f'<circle cx="{_num(c.cx)}" cy="{_num(c.cy)}" r="{_num(c.r)}" fill="{_esc(c.fill)}" '
            f'stroke="{_esc(c.stroke)}" stroke-width="{_num(c.stroke_width)}">'
            f"<title>{_esc(c.title)}</title></circle>"
        )
    parts.append("</g></g>")
    return "\n".join(parts)


def render_snapshot(views: Iterable[VariantView], output_path: Path) -> Path:
    """Write every view's current scene into one SVG file, left to right."""
    scenes = [view.scene for view in views]
    width = sum(s.width for s in scenes) + PANEL_GAP * max(len(scenes) - 1, 0)
    height = max((s.height for s in scenes), default=0) + TITLE_HEIGHT

    body: list[str] = []
    offset = 0.0
    for scene in scenes:
        title = PANEL_TITLES.get(scene.variant.value, scene.variant.value)
        body.append(
            f'<text x="{_num(offset + scene.width / 2)}" y="16" text-anchor="middle" '
            f'font-family="sans-serif" font-size="13">{_esc(title)}</text>'
        )
        body.append(scene_to_svg(scene, offset))
        offset += scene.width + PANEL_GAP

    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(width)}" height="{_num(height)}" '
        f'viewBox="0 0 {_num(width)} {_num(height)}">\n'
        + "\n".join(body)
        + "\n</svg>\n"
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(svg)
    logger.info("Snapshot written to %s", output_path)
    return output_path

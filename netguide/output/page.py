"""Interactive comparison page — plain vs. guideline-encoded force layouts.

The result is a self-contained HTML page with two D3.js force graphs side by
side, guideline checkboxes that re-render the annotated view, a preview of the
first edges, and the scripted agent narration replayed on load.
"""

import json
import logging
from pathlib import Path

from netguide.config import Config
from netguide.degrees import compute_degrees
from netguide.models import Guideline
from netguide.narration import Cue, upload_script
from netguide.output import esc as _esc
from netguide.state import AppState

logger = logging.getLogger(__name__)

GUIDELINE_LABELS = {
    Guideline.SIZE: "Node size by degree",
    Guideline.COLOR: "Node color by index",
    Guideline.CROSSINGS: "Minimize edge crossings",
    Guideline.CLUSTERING: "Show clustering",
}


def _cue_dict(cue: Cue) -> dict:
    return {"delay": cue.delay_ms, "speaker": cue.speaker, "text": cue.text, "status": cue.status}


def build_page_data(state: AppState, config: Config) -> dict:
    """Collect everything the page script needs as plain JSON."""
    if state.dataset is None:
        raise ValueError("No dataset loaded")

    preview = state.preview(config.preview_limit)
    return {
        "title": state.dataset_info,
        "preview_header": preview.header,
        "preview_edges": [list(pair) for pair in preview.edges],
        "nodes": [node.model_dump() for node in state.dataset.nodes],
        "links": [{"source": e.source, "target": e.target} for e in state.dataset.links],
        "degrees": compute_degrees(state.dataset),
        "guidelines": sorted(g.value for g in state.guidelines),
        "layout": {
            "width": config.layout.width,
            "height": config.layout.height,
            "link_distance": config.layout.link_distance,
            "charge_strength": config.layout.charge_strength,
            "collision_radius": config.layout.collision_radius,
            "alpha_target_drag": config.layout.alpha_target_drag,
        },
        "encoding": config.encoding.model_dump(),
        "narration": [_cue_dict(c) for c in upload_script(state.source_name or "dataset")],
    }


def generate_page(state: AppState, config: Config, output_path: Path | None = None) -> Path:
    """Write the comparison page and return its path."""
    data = build_page_data(state, config)
    if output_path is None:
        output_path = config.resolved_output_dir / "netguide.html"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(_render_html(data, state))
    logger.info("Page written to %s", output_path)
    return output_path


def _render_html(data: dict, state: AppState) -> str:
    data_json = json.dumps(data).replace("</", "<\\/")
    checkboxes = "\n".join(
        f'    <label class="guideline-item" data-guideline="{g.value}">'
        f'<input type="checkbox" class="guideline-checkbox" value="{g.value}"'
        f'{" checked" if g in state.guidelines else ""}> {_esc(GUIDELINE_LABELS[g])}</label>'
        for g in Guideline
    )
    title = _esc(data["title"] or "netguide")

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{
    margin: 0;
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
    background: #f5f6fa;
    color: #2d3436;
}}
header {{
    padding: 12px 20px;
    background: linear-gradient(135deg, #667eea, #764ba2);
    color: #fff;
}}
header h1 {{ margin: 0; font-size: 18px; }}
#dataset-info {{ font-size: 12px; opacity: 0.85; }}
main {{ display: grid; grid-template-columns: 1fr 300px; gap: 16px; padding: 16px 20px; }}
.panels {{ display: grid; grid-template-columns: 1fr 1fr; gap: 16px; }}
.panel {{ background: #fff; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }}
.panel h2 {{ margin: 0; padding: 8px 12px; font-size: 13px; border-bottom: 1px solid #eee; }}
.viz {{ width: 100%; height: {data["layout"]["height"]}px; }}
.link {{ stroke: #999; stroke-opacity: 0.6; }}
.node {{ cursor: grab; }}
.guidelines {{ display: flex; gap: 16px; padding: 0 20px; font-size: 13px; }}
.guideline-item {{ cursor: pointer; padding: 4px 8px; border-radius: 4px; }}
.guideline-item.active {{ background: #e8eaff; }}
table {{ border-collapse: collapse; width: 100%; font-size: 12px; }}
th, td {{ border-bottom: 1px solid #eee; padding: 4px 8px; text-align: left; }}
#chatMessages {{ font-size: 12px; max-height: 420px; overflow-y: auto; padding: 8px 12px; }}
.message {{ margin-bottom: 10px; }}
.message-name {{ font-weight: 600; }}
.agent-status {{ color: #636e72; font-style: italic; margin-left: 8px; }}
</style>
</head>
<body>

<header>
    <h1>Network Visualization with Guidelines</h1>
    <div id="dataset-info">{title}</div>
</header>

<div class="guidelines">
{checkboxes}
</div>

<main>
    <div>
        <div class="panels">
            <div class="panel"><h2>Without Guidelines</h2><div class="viz" id="viz-without"></div></div>
            <div class="panel"><h2>With Guidelines</h2><div class="viz" id="viz-with"></div></div>
        </div>
        <div class="panel" style="margin-top:16px">
            <h2 id="previewHeader"></h2>
            <table>
                <thead><tr><th>FromNodeId</th><th>ToNodeId</th></tr></thead>
                <tbody id="previewTableBody"></tbody>
            </table>
        </div>
    </div>
    <div class="panel">
        <h2>Agents</h2>
        <div id="chatMessages"></div>
    </div>
</main>

<script src="https://d3js.org/d3.v7.min.js"></script>
<script>
const DATA = {data_json};
const LAYOUT = DATA.layout;
const ENC = DATA.encoding;
const activeGuidelines = new Set(DATA.guidelines);

function nodeRadius(d, withGuidelines) {{
    if (withGuidelines && activeGuidelines.has("size")) {{
        return ENC.base_radius + (DATA.degrees[d.id] || 0) * ENC.degree_scale;
    }}
    return ENC.base_radius;
}}

function nodeFill(i, withGuidelines) {{
    if (withGuidelines && activeGuidelines.has("color")) {{
        return ENC.palette[i % ENC.palette.length];
    }}
    return ENC.neutral_color;
}}

function renderGraph(containerId, withGuidelines) {{
    const container = document.getElementById(containerId);
    container.innerHTML = "";
    const width = container.clientWidth || LAYOUT.width;
    const height = container.clientHeight || LAYOUT.height;

    const svg = d3.select("#" + containerId).append("svg")
        .attr("width", width)
        .attr("height", height);

    // Each view lays out its own copy of the data.
    const graph = JSON.parse(JSON.stringify({{nodes: DATA.nodes, links: DATA.links}}));
    const ids = new Set(graph.nodes.map(d => d.id));
    const links = graph.links.filter(l => ids.has(l.source) && ids.has(l.target));

    const simulation = d3.forceSimulation(graph.nodes)
        .force("link", d3.forceLink(links).id(d => d.id).distance(LAYOUT.link_distance))
        .force("charge", d3.forceManyBody().strength(LAYOUT.charge_strength))
        .force("center", d3.forceCenter(width / 2, height / 2))
        .force("collision", d3.forceCollide().radius(LAYOUT.collision_radius));

    const link = svg.append("g")
        .selectAll("line")
        .data(links)
        .join("line")
        .attr("class", "link")
        .attr("stroke-width", ENC.link_stroke_width);

    const node = svg.append("g")
        .selectAll("circle")
        .data(graph.nodes)
        .join("circle")
        .attr("class", "node")
        .attr("r", d => nodeRadius(d, withGuidelines))
        .attr("fill", (d, i) => nodeFill(i, withGuidelines))
        .attr("stroke", ENC.stroke)
        .attr("stroke-width", ENC.stroke_width)
        .call(drag(simulation));

    node.append("title").text(d => `Node: ${{d.id}}\\nDegree: ${{DATA.degrees[d.id] || 0}}`);

    simulation.on("tick", () => {{
        link.attr("x1", d => d.source.x).attr("y1", d => d.source.y)
            .attr("x2", d => d.target.x).attr("y2", d => d.target.y);
        node.attr("cx", d => d.x).attr("cy", d => d.y);
    }});
}}

function drag(simulation) {{
    function dragStart(e) {{ if (!e.active) simulation.alphaTarget(LAYOUT.alpha_target_drag).restart(); e.subject.fx = e.subject.x; e.subject.fy = e.subject.y; }}
    function dragging(e) {{ e.subject.fx = e.x; e.subject.fy = e.y; }}
    function dragEnd(e) {{ if (!e.active) simulation.alphaTarget(0); e.subject.fx = null; e.subject.fy = null; }}
    return d3.drag().on("start", dragStart).on("drag", dragging).on("end", dragEnd);
}}

function renderVisualizations() {{
    renderGraph("viz-without", false);
    renderGraph("viz-with", true);
}}

function renderPreview() {{
    document.getElementById("previewHeader").textContent = DATA.preview_header;
    const tbody = document.getElementById("previewTableBody");
    for (const [s, t] of DATA.preview_edges) {{
        const row = document.createElement("tr");
        row.innerHTML = "<td></td><td></td>";
        row.children[0].textContent = s;
        row.children[1].textContent = t;
        tbody.appendChild(row);
    }}
}}

function initGuidelines() {{
    document.querySelectorAll(".guideline-item").forEach(item => {{
        const checkbox = item.querySelector(".guideline-checkbox");
        item.classList.toggle("active", checkbox.checked);
        checkbox.addEventListener("change", () => {{
            if (checkbox.checked) activeGuidelines.add(checkbox.value);
            else activeGuidelines.delete(checkbox.value);
            item.classList.toggle("active", checkbox.checked);
            renderVisualizations();
        }});
    }});
}}

function playNarration() {{
    const container = document.getElementById("chatMessages");
    for (const cue of DATA.narration) {{
        setTimeout(() => {{
            if (cue.status && container.lastElementChild) {{
                const status = document.createElement("div");
                status.className = "agent-status";
                status.textContent = cue.text;
                container.lastElementChild.appendChild(status);
            }} else {{
                const msg = document.createElement("div");
                msg.className = "message";
                msg.innerHTML = '<div class="message-name"></div><div class="message-content"></div>';
                msg.children[0].textContent = cue.speaker;
                msg.children[1].textContent = cue.text;
                container.appendChild(msg);
            }}
            container.scrollTop = container.scrollHeight;
        }}, cue.delay);
    }}
}}

initGuidelines();
renderPreview();
renderVisualizations();
playNarration();
</script>
</body>
</html>'''

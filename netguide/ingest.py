"""Ingestion — turns uploaded JSON or CSV edge-list text into a Dataset."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from netguide.models import Dataset, Edge, FormatError, Node

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv")


def detect_format(filename: str) -> str:
    """Pick the ingestion format from a file name's extension."""
    suffix = Path(filename).suffix.lower().lstrip(".")
    if suffix not in SUPPORTED_FORMATS:
        raise FormatError(f"Unsupported file type '{Path(filename).name}' (expected .json or .csv)")
    return suffix


def ingest(raw_text: str, fmt: str) -> Dataset:
    """Parse raw upload text into a fresh Dataset.

    Args:
        raw_text: The complete, already-read file contents.
        fmt: "json" or "csv".

    Raises:
        FormatError: The text is not a valid dataset in the given format.
    """
    if fmt == "json":
        dataset = parse_json(raw_text)
    elif fmt == "csv":
        dataset = parse_csv(raw_text)
    else:
        raise FormatError(f"Unknown format '{fmt}' (expected one of {', '.join(SUPPORTED_FORMATS)})")

    _warn_dangling(dataset)
    logger.info("Ingested %s dataset: %d nodes, %d edges", fmt, len(dataset.nodes), len(dataset.links))
    return dataset


def ingest_file(path: Path) -> Dataset:
    """Read a .json or .csv file and ingest it."""
    fmt = detect_format(path.name)
    return ingest(path.read_text(errors="replace"), fmt)


def parse_json(raw_text: str) -> Dataset:
    """Decode a {"nodes": [...], "links": [...]} document.

    Only the shape is checked: nodes need an id, links need a source and a
    target. Extra fields, duplicate ids and unknown ids pass through.
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise FormatError(str(e)) from e

    if not isinstance(data, dict):
        raise FormatError(f"Expected a JSON object with 'nodes' and 'links', got {type(data).__name__}")
    missing = [key for key in ("nodes", "links") if key not in data]
    if missing:
        raise FormatError(f"JSON document is missing {', '.join(repr(k) for k in missing)}")

    try:
        return Dataset(nodes=data["nodes"], links=data["links"])
    except ValidationError as e:
        raise FormatError(str(e)) from e


def parse_csv(raw_text: str) -> Dataset:
    """Read a source,target edge list. The first line is a header and is skipped.

    Nodes are every id seen in either column, in first-seen order.
    """
    lines = raw_text.strip().splitlines()
    seen: dict[str, None] = {}
    links: list[Edge] = []

    for lineno, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        values = [v.strip() for v in line.split(",")]
        if len(values) < 2:
            raise FormatError(f"Line {lineno}: expected 'source,target', got {line.strip()!r}")
        source, target = values[0], values[1]
        seen.setdefault(source)
        seen.setdefault(target)
        links.append(Edge(source=source, target=target))

    return Dataset(nodes=[Node(id=node_id) for node_id in seen], links=links)


def _warn_dangling(dataset: Dataset) -> None:
    known = {node.id for node in dataset.nodes}
    dangling = {
        node_id
        for edge in dataset.links
        for node_id in (edge.source, edge.target)
        if node_id not in known
    }
    if dangling:
        logger.warning(
            "%d edge endpoint(s) reference unknown nodes: %s",
            len(dangling), ", ".join(sorted(dangling)[:5]),
        )

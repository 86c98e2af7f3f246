"""Pydantic models for netguide."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FormatError(ValueError):
    """Raised when uploaded text cannot be ingested as a dataset."""


class Guideline(str, Enum):
    SIZE = "size"
    COLOR = "color"
    CROSSINGS = "crossings"  # accepted, no visual effect
    CLUSTERING = "clustering"  # accepted, no visual effect


class Variant(str, Enum):
    PLAIN = "plain"
    ANNOTATED = "annotated"


# --- Dataset model (what ingestion produces) ---


class Node(BaseModel):
    """A graph node. Extra fields from JSON uploads are kept as-is."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str


class Edge(BaseModel):
    """An edge between two node ids, as ingested."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    source: str
    target: str

    @field_validator("source", "target", mode="before")
    @classmethod
    def _endpoint_object_to_id(cls, value: Any) -> Any:
        # Links exported from a running layout carry node objects.
        if isinstance(value, dict) and "id" in value:
            return value["id"]
        return value


class Dataset(BaseModel):
    nodes: list[Node] = Field(default_factory=list)
    links: list[Edge] = Field(default_factory=list)


# --- Edge endpoints inside a layout engine ---


@dataclass(frozen=True)
class Unresolved:
    """Endpoint still referring to a node by raw id."""
    node_id: str


@dataclass(frozen=True)
class Resolved:
    """Endpoint bound to a live layout node."""
    node: Any

    @property
    def node_id(self) -> str:
        return self.node.id


Endpoint = Unresolved | Resolved | str


def endpoint_id(endpoint: Endpoint) -> str:
    """Return the plain node id for any endpoint representation."""
    if isinstance(endpoint, (Unresolved, Resolved)):
        return endpoint.node_id
    return endpoint


# --- Presentation models ---


class NodeStyle(BaseModel):
    radius: float
    fill: str


class DatasetPreview(BaseModel):
    """Summary shown after a successful ingestion."""
    node_count: int
    edge_count: int
    edges: list[tuple[str, str]]

    @property
    def header(self) -> str:
        return f"Dataset Preview - {self.node_count} nodes, {self.edge_count} edges"

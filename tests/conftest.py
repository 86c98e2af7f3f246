"""Shared test fixtures for netguide tests."""

import pytest

from netguide.config import Config, EncodingConfig, LayoutConfig, SampleConfig
from netguide.ingest import ingest
from netguide.models import Dataset, Edge, Node


@pytest.fixture()
def config(tmp_path):
    """Default config writing into a temp output dir."""
    return Config(
        layout=LayoutConfig(),
        encoding=EncodingConfig(),
        sample=SampleConfig(),
        output_dir=str(tmp_path / "output"),
    )


@pytest.fixture()
def triangle_csv():
    return "h1,h2\nA,B\nB,C\nA,C\n"


@pytest.fixture()
def triangle(triangle_csv):
    """A, B, C all connected to each other."""
    return ingest(triangle_csv, "csv")


@pytest.fixture()
def dangling():
    """Two real nodes plus an edge pointing at a node that does not exist."""
    return Dataset(
        nodes=[Node(id="a"), Node(id="b")],
        links=[Edge(source="a", target="b"), Edge(source="a", target="ghost")],
    )

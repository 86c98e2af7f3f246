"""Tests for JSON and CSV ingestion."""

import json

import pytest

from netguide.degrees import compute_degrees
from netguide.ingest import detect_format, ingest, ingest_file
from netguide.models import FormatError


class TestCSV:
    def test_triangle(self, triangle_csv):
        dataset = ingest(triangle_csv, "csv")
        assert [n.id for n in dataset.nodes] == ["A", "B", "C"]
        assert [(e.source, e.target) for e in dataset.links] == [("A", "B"), ("B", "C"), ("A", "C")]
        assert compute_degrees(dataset) == {"A": 2, "B": 2, "C": 2}

    def test_first_seen_order(self):
        dataset = ingest("from,to\nz,y\nx,z\n", "csv")
        assert [n.id for n in dataset.nodes] == ["z", "y", "x"]

    def test_header_discarded(self):
        dataset = ingest("source,target\n1,2\n", "csv")
        assert {n.id for n in dataset.nodes} == {"1", "2"}

    def test_whitespace_trimmed_and_extra_fields_ignored(self):
        dataset = ingest("a,b,weight\n  p ,  q , 3.5\n", "csv")
        assert dataset.links[0].source == "p"
        assert dataset.links[0].target == "q"
        assert [n.id for n in dataset.nodes] == ["p", "q"]

    def test_blank_lines_skipped(self):
        dataset = ingest("a,b\nA,B\n\n   \nB,C\n", "csv")
        assert len(dataset.links) == 2

    def test_crlf_line_endings(self):
        dataset = ingest("a,b\r\nA,B\r\nB,C\r\n", "csv")
        assert [n.id for n in dataset.nodes] == ["A", "B", "C"]

    def test_header_only(self):
        dataset = ingest("a,b\n", "csv")
        assert dataset.nodes == []
        assert dataset.links == []

    def test_single_field_line_rejected(self):
        with pytest.raises(FormatError, match="Line 3"):
            ingest("a,b\nA,B\nlonely\n", "csv")

    def test_self_loop_makes_one_node(self):
        dataset = ingest("a,b\nA,A\n", "csv")
        assert [n.id for n in dataset.nodes] == ["A"]
        assert compute_degrees(dataset) == {"A": 2}


class TestJSON:
    def test_single_node(self):
        dataset = ingest('{"nodes":[{"id":"x"}],"links":[]}', "json")
        assert len(dataset.nodes) == 1
        assert dataset.links == []
        assert compute_degrees(dataset) == {"x": 0}

    def test_extra_fields_kept(self):
        raw = json.dumps({
            "nodes": [{"id": "a", "group": 3}, {"id": "b"}],
            "links": [{"source": "a", "target": "b", "value": 2}],
        })
        dataset = ingest(raw, "json")
        assert dataset.nodes[0].model_extra == {"group": 3}
        assert dataset.links[0].model_extra == {"value": 2}

    def test_numeric_ids_become_strings(self):
        dataset = ingest('{"nodes":[{"id":1},{"id":2}],"links":[{"source":1,"target":2}]}', "json")
        assert [n.id for n in dataset.nodes] == ["1", "2"]
        assert dataset.links[0].source == "1"

    def test_endpoint_objects_reduced_to_ids(self):
        raw = '{"nodes":[{"id":"a"},{"id":"b"}],"links":[{"source":{"id":"a","x":1},"target":{"id":"b"}}]}'
        dataset = ingest(raw, "json")
        assert (dataset.links[0].source, dataset.links[0].target) == ("a", "b")

    def test_unknown_ids_pass_through(self):
        dataset = ingest('{"nodes":[{"id":"a"}],"links":[{"source":"a","target":"nope"}]}', "json")
        assert dataset.links[0].target == "nope"
        assert compute_degrees(dataset) == {"a": 1, "nope": 1}

    def test_syntax_error_carries_parser_message(self):
        with pytest.raises(FormatError) as exc_info:
            ingest('{"nodes": [', "json")
        assert "line 1" in str(exc_info.value)

    def test_not_an_object(self):
        with pytest.raises(FormatError, match="list"):
            ingest("[1, 2]", "json")

    def test_missing_links(self):
        with pytest.raises(FormatError, match="'links'"):
            ingest('{"nodes": []}', "json")

    def test_node_without_id(self):
        with pytest.raises(FormatError, match="id"):
            ingest('{"nodes":[{"name":"a"}],"links":[]}', "json")


class TestFormats:
    def test_detect(self):
        assert detect_format("graph.json") == "json"
        assert detect_format("EDGES.CSV") == "csv"

    def test_detect_unsupported(self):
        with pytest.raises(FormatError, match="Unsupported"):
            detect_format("graph.txt")

    def test_unknown_format_name(self):
        with pytest.raises(FormatError):
            ingest("a,b\n", "tsv")

    def test_ingest_file(self, tmp_path, triangle_csv):
        path = tmp_path / "edges.csv"
        path.write_text(triangle_csv)
        dataset = ingest_file(path)
        assert len(dataset.nodes) == 3
        assert len(dataset.links) == 3

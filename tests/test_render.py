"""Tests for the per-variant render loop."""

import math

import pytest

from netguide.encoding import NEUTRAL_COLOR, PALETTE
from netguide.models import Guideline, Variant
from netguide.render import VariantView, render_views, run_views
from netguide.sample import generate_sample

ALL = frozenset(Guideline)


class TestRenderViews:
    def test_both_variants(self, triangle, config):
        views = render_views(triangle, ALL, config)
        assert set(views) == {Variant.PLAIN, Variant.ANNOTATED}
        assert views[Variant.PLAIN].scene.variant == Variant.PLAIN

    def test_encodings_per_variant(self, triangle, config):
        views = render_views(triangle, ALL, config)
        plain = views[Variant.PLAIN].scene.circles
        annotated = views[Variant.ANNOTATED].scene.circles

        assert [c.r for c in plain] == [5, 5, 5]
        assert [c.fill for c in plain] == [NEUTRAL_COLOR] * 3
        # every triangle node has degree 2
        assert [c.r for c in annotated] == [6, 6, 6]
        assert [c.fill for c in annotated] == list(PALETTE[:3])

    def test_size_only_guideline(self, triangle, config):
        views = render_views(triangle, {Guideline.SIZE}, config)
        circles = views[Variant.ANNOTATED].scene.circles
        assert all(c.r == 6 and c.fill == NEUTRAL_COLOR for c in circles)

    def test_circle_styling(self, triangle, config):
        view = VariantView(triangle, Variant.PLAIN, ALL, config)
        circle = view.scene.circles[0]
        assert circle.title == "Node: A\nDegree: 2"
        assert circle.stroke == "#fff"
        assert circle.stroke_width == 1.5
        assert view.scene.lines[0].stroke_width == 1

    def test_source_dataset_untouched(self, triangle, config):
        before = triangle.model_dump()
        views = render_views(triangle, ALL, config)
        run_views(views.values(), max_ticks=10)
        assert triangle.model_dump() == before


class TestRedraw:
    def test_scene_follows_simulation(self, triangle, config):
        view = VariantView(triangle, Variant.ANNOTATED, ALL, config)
        view.simulation.run(max_ticks=4)
        assert view.scene.frames == 5  # initial draw + 4 ticks

        for circle, node in zip(view.scene.circles, view.simulation.nodes):
            assert (circle.cx, circle.cy) == (node.x, node.y)

        line = view.scene.lines[0]
        a, b = view.simulation.find("A"), view.simulation.find("B")
        assert (line.source_id, line.target_id) == ("A", "B")
        assert (line.x1, line.y1, line.x2, line.y2) == (a.x, a.y, b.x, b.y)

    def test_drag_reflected_in_scene(self, triangle, config):
        view = VariantView(triangle, Variant.PLAIN, ALL, config)
        node = view.simulation.find("C")
        view.drag.start(node)
        view.drag.move(node, 33.0, 44.0)
        view.simulation.tick()
        circle = next(c for c in view.scene.circles if c.node_id == "C")
        assert (circle.cx, circle.cy) == (33.0, 44.0)

    def test_missing_endpoint_draws_nan(self, dangling, config):
        view = VariantView(dangling, Variant.ANNOTATED, ALL, config)
        view.simulation.run(max_ticks=5)
        ghost_line = view.scene.lines[1]
        assert ghost_line.target_id == "ghost"
        assert math.isfinite(ghost_line.x1) and math.isfinite(ghost_line.y1)
        assert math.isnan(ghost_line.x2) and math.isnan(ghost_line.y2)
        assert len(view.scene.circles) == 2


class TestVariantIsolation:
    def test_moving_plain_never_moves_annotated(self, config):
        views = render_views(generate_sample(seed=11), ALL, config)
        plain, annotated = views[Variant.PLAIN], views[Variant.ANNOTATED]
        before = [(n.x, n.y) for n in annotated.simulation.nodes]

        for node in plain.simulation.nodes:
            node.x += 100.0
            node.y -= 50.0
        plain.drag.start(plain.simulation.nodes[0])
        plain.simulation.run(max_ticks=10)

        assert [(n.x, n.y) for n in annotated.simulation.nodes] == before
        assert annotated.simulation.nodes[0].fx is None
        assert annotated.simulation.alpha_target == 0.0

    def test_each_view_owns_its_dataset(self, triangle, config):
        views = render_views(triangle, ALL, config)
        plain, annotated = views[Variant.PLAIN], views[Variant.ANNOTATED]
        assert plain.dataset is not annotated.dataset
        assert plain.dataset.nodes[0] is not annotated.dataset.nodes[0]
        assert plain.dataset.nodes[0] is not triangle.nodes[0]
        assert plain.simulation.nodes[0] is not annotated.simulation.nodes[0]


class TestRunViews:
    def test_interleaves_until_limit(self, triangle, config):
        views = render_views(triangle, ALL, config)
        assert run_views(views.values(), max_ticks=5) == 5
        assert all(v.scene.frames == 6 for v in views.values())

    def test_runs_until_cool(self, triangle, config):
        config.layout.max_ticks = 30
        views = render_views(triangle, ALL, config)
        rounds = run_views(views.values(), max_ticks=100)
        assert 29 <= rounds <= 31
        assert not any(v.simulation.running for v in views.values())

    def test_empty(self):
        assert run_views([]) == 0

    @pytest.mark.parametrize("variant", list(Variant))
    def test_single_view(self, triangle, config, variant):
        view = VariantView(triangle, variant, ALL, config)
        assert run_views([view], max_ticks=2) == 2

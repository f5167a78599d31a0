"""
Unit tests for sketchy.py and olympic_renderers.py

Scenes are checked by their keys, groups and payload, never by pixels.
"""

import dataclasses
import json
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from force_layout import FrameRecorder
from legend_filter import LegendClick, LegendFilter
from olympic_renderers import (
    build_first_time_simulation,
    build_sports_simulation,
    render_first_participation,
    render_gender_pies,
    render_paralympics,
    render_reveal_pie,
    render_sustainability_timeline,
)
from schema_generator import (
    build_first_time_schema,
    build_gender_schema,
    build_paralympics_schema,
    build_timeline_schema,
)
from sketchy import (
    SCENE_PLACEHOLDER,
    CirclePrimitive,
    PathPrimitive,
    RectPrimitive,
    Scene,
    SketchStyle,
    build_scene_html,
    circle,
    empty_scene,
    load_template,
    render_sketchy,
    stable_seed,
    text,
)
from tests.fixtures.sample_data import (
    sample_country_records,
    sample_female_records,
    sample_paralympics_records,
    sample_timeline_records,
)

STYLE = SketchStyle(stroke="#ff006e", fill="#ff006e", fill_style="zigzag", roughness=2)


class TestRenderSketchy(unittest.TestCase):
    """Test suite for the rough.js adapter."""

    def test_shapes(self):
        self.assertEqual(render_sketchy(PathPrimitive("M0,0L1,1"), STYLE).shape, "path")
        self.assertEqual(render_sketchy(RectPrimitive(0, 0, 10, 20), STYLE).args, (0, 0, 10, 20))
        self.assertEqual(render_sketchy(CirclePrimitive(5, 5, 80), STYLE).shape, "circle")

    def test_options_use_rough_names(self):
        options = dict(render_sketchy(CirclePrimitive(0, 0, 10), STYLE, seed=3).options)
        self.assertEqual(options["fillStyle"], "zigzag")
        self.assertEqual(options["strokeWidth"], 1.0)
        self.assertEqual(options["seed"], 3)

    def test_drawable_is_frozen(self):
        drawable = render_sketchy(CirclePrimitive(0, 0, 10), STYLE)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            drawable.shape = "rectangle"

    def test_not_a_primitive(self):
        with self.assertRaises(TypeError):
            render_sketchy("circle", STYLE)

    def test_seed_is_stable(self):
        self.assertEqual(stable_seed("pie-1900-male"), stable_seed("pie-1900-male"))
        self.assertNotEqual(stable_seed("pie-1900-male"), stable_seed("pie-1900-female"))


class TestScene(unittest.TestCase):
    """Test suite for the retained scene and its HTML shell."""

    def test_duplicate_key_rejected(self):
        scene = Scene(100, 100)
        scene.add("a", circle(0, 0, 5))
        with self.assertRaises(ValueError):
            scene.add("a", circle(1, 1, 5))

    def test_marks_drop_none_and_hyphenate(self):
        mark = text(1, 2, "hi", font_size=12, fill=None)
        attrs = dict(mark.attrs)
        self.assertIn("font-size", attrs)
        self.assertNotIn("fill", attrs)

    def test_payload_groups_in_order(self):
        scene = Scene(100, 100)
        scene.group("back", "translate(1, 2)")
        scene.add("front-item", circle(0, 0, 5), group="front")
        scene.add("back-item", circle(0, 0, 5), group="back", tooltip="tip")
        payload = scene.to_payload()
        self.assertEqual([g["id"] for g in payload["groups"]], ["back", "front"])
        self.assertEqual(payload["groups"][0]["transform"], "translate(1, 2)")
        self.assertEqual(payload["groups"][0]["items"][0]["tooltip"], "tip")

    def test_html_embeds_scene(self):
        scene = empty_scene(200, 100, "</script> no data")
        html = build_scene_html(scene, "<script>\n" + SCENE_PLACEHOLDER + "\n</script>")
        self.assertNotIn(SCENE_PLACEHOLDER, html)
        self.assertIn("var scene = ", html)
        self.assertEqual(html.count("</script>"), 1)
        body = html.split("var scene = ", 1)[1].rsplit(";", 1)[0]
        self.assertEqual(json.loads(body)["width"], 200)

    def test_html_needs_placeholder(self):
        with self.assertRaises(ValueError):
            build_scene_html(Scene(10, 10), "<html></html>")

    def test_bundled_template_has_placeholder(self):
        template = load_template(config.TEMPLATE_PATH)
        self.assertIn(SCENE_PLACEHOLDER, template)
        self.assertIn("rough", template)


class TestFirstParticipation(unittest.TestCase):

    def setUp(self):
        self.schema = build_first_time_schema(sample_country_records(), list(config.CONTINENT_COLOURS))
        self.legend = LegendFilter(self.schema["continents"], config.HIGHLIGHTED, config.DIMMED)

    def test_one_circle_per_country_with_tooltip(self):
        positions = build_first_time_simulation(self.schema).position_map()
        scene = render_first_participation(self.schema, self.legend, positions)
        nodes = scene.by_group("nodes")
        self.assertEqual(len(nodes), len(sample_country_records()))
        self.assertEqual(scene.get("country-Japan").tooltip, "Japan 1912")
        self.assertIsNone(scene.frames)

    def test_multi_continent_country_uses_gradient(self):
        positions = build_first_time_simulation(self.schema).position_map()
        scene = render_first_participation(self.schema, self.legend, positions)
        fill = dict(scene.get("country-Turkey").element.attrs)["fill"]
        self.assertEqual(fill, "url(#asia-europe)")

    def test_legend_dims_other_continents(self):
        self.legend.handle(LegendClick("Africa"))
        positions = build_first_time_simulation(self.schema).position_map()
        scene = render_first_participation(self.schema, self.legend, positions)
        self.assertEqual(scene.get("country-Kenya").opacity, config.HIGHLIGHTED)
        self.assertEqual(scene.get("country-Japan").opacity, config.DIMMED)
        self.assertEqual(scene.get("legend-Asia").opacity, config.DIMMED)
        self.assertIn("legend-missing", scene.keys())

    def test_played_layout_carries_frames(self):
        recorder = FrameRecorder(stride=50)
        sim = build_first_time_simulation(self.schema, on_tick=recorder)
        recorder.finish(sim.run())
        scene = render_first_participation(self.schema, self.legend, sim.position_map(), recorder.frames)
        self.assertEqual(scene.frames["frames"][-1]["country-Greece"][0], round(sim.position_map()["country-Greece"].x, 2))
        self.assertEqual(scene.frames["radius"], config.FIRST_TIME_PLAYED_RADIUS)

    def test_rerun_after_play_keeps_radius_without_replaying(self):
        """A legend click after play redraws the resting layout, no animation."""
        positions = build_first_time_simulation(self.schema).position_map()
        self.legend.handle(LegendClick("Asia"))
        scene = render_first_participation(self.schema, self.legend, positions, played=True)
        self.assertIsNone(scene.frames)
        self.assertEqual(dict(scene.get("country-Japan").element.attrs)["r"], config.FIRST_TIME_PLAYED_RADIUS)
        self.assertIn("country-Japan", build_scene_html(scene, SCENE_PLACEHOLDER))

    def test_not_played_uses_resting_radius(self):
        positions = build_first_time_simulation(self.schema).position_map()
        scene = render_first_participation(self.schema, self.legend, positions)
        self.assertEqual(dict(scene.get("country-Japan").element.attrs)["r"], config.FIRST_TIME_NODE_RADIUS)

    def test_dimmed_legend_labels_fade_like_the_circles(self):
        self.legend.handle(LegendClick("Africa"))
        positions = build_first_time_simulation(self.schema).position_map()
        scene = render_first_participation(self.schema, self.legend, positions)
        self.assertEqual(dict(scene.get("legend-label-Asia").element.attrs)["opacity"], config.DIMMED.fill)
        self.assertEqual(dict(scene.get("legend-label-Africa").element.attrs)["opacity"], config.HIGHLIGHTED.stroke)


class TestTimeline(unittest.TestCase):

    def test_three_items_per_event(self):
        scene = render_sustainability_timeline(build_timeline_schema(sample_timeline_records()))
        for key in ("event-0", "event-1", "event-2"):
            for suffix in ("", "-stem", "-sketch"):
                self.assertIn(key + suffix, scene.keys())
        sketch = dict(scene.get("event-1-sketch").element.options)
        self.assertEqual(sketch["fillStyle"], "zigzag-line")
        self.assertIn("Downhill course replanted", scene.get("event-0").tooltip)

    def test_negative_events_hang_below_the_axis(self):
        scene = render_sustainability_timeline(build_timeline_schema(sample_timeline_records()))
        self.assertGreater(dict(scene.get("event-2").element.attrs)["cy"], 0)
        self.assertLess(dict(scene.get("event-0").element.attrs)["cy"], 0)


class TestGenderPies(unittest.TestCase):

    def test_empty_slice_is_skipped(self):
        scene = render_gender_pies(build_gender_schema(sample_female_records()))
        keys = scene.keys()
        self.assertIn("pie-1896-male", keys)
        self.assertNotIn("pie-1896-female", keys)
        self.assertIn("pie-1900-female", keys)
        self.assertIn("legend-female", keys)
        self.assertIn("10% of athletes were women", scene.get("pie-1900-hit").tooltip)

    def test_grid_groups(self):
        scene = render_gender_pies(build_gender_schema(sample_female_records()))
        self.assertEqual(scene.groups["pie-1896"], "translate(72.5, 142.5)")
        self.assertEqual(scene.groups["pie-1900"], "translate(217.5, 142.5)")

    def test_reveal_pie(self):
        scene = render_reveal_pie()
        for key in ("reveal-male-1", "reveal-female-2", "reveal-button", "reveal-button-label"):
            self.assertIn(key, scene.keys())


class TestParalympics(unittest.TestCase):

    def setUp(self):
        games, sports = sample_paralympics_records()
        self.schema = build_paralympics_schema(games, sports, rows=config.PARA_SPORT_ROWS)

    def test_bars_dots_and_annotation(self):
        positions = build_sports_simulation(self.schema).run()
        scene = render_paralympics(self.schema, {p.key: p for p in positions})
        self.assertIn("bar-1960", scene.keys())
        self.assertIn("Tokyo", scene.get("bar-1964").tooltip)
        self.assertEqual(len(scene.by_group("sports")), 5)
        self.assertIn("annotation-title", scene.keys())

    def test_tallest_bar_reaches_the_top(self):
        positions = build_sports_simulation(self.schema).position_map()
        scene = render_paralympics(self.schema, positions)
        top = dict(scene.get("bar-1964").element.attrs)["y"]
        self.assertAlmostEqual(top, config.PARA_MARGIN["top"])


if __name__ == "__main__":
    unittest.main()

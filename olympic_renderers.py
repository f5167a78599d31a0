# -*- coding: utf-8 -*-
from __future__ import annotations

from html import escape
from typing import Dict, Iterable, List, Optional, Sequence

import config
from force_layout import CancellationToken, ForceSimulation, PlacedNode, SimNode, TickCallback
from legend_filter import LegendFilter
from pie_geometry import arc_path, pie
from scales import BandScale, LinearScale, PointScale, color_ramp
from sketchy import (
    CirclePrimitive,
    PathPrimitive,
    RectPrimitive,
    Scene,
    SketchStyle,
    circle,
    line,
    path,
    rect,
    text,
)


def _translate(x: float, y: float) -> str:
    return f"translate({round(x, 2)}, {round(y, 2)})"


def _hand_axis(scene: Scene, group: str, ticks: Iterable, x0: float, x1: float, colour: str) -> None:
    """Thick rounded baseline with hand-lettered labels under it, no tick lines."""
    scene.add(
        f"{group}-domain",
        line(x0, 0, x1, 0, stroke=colour, stroke_width=config.AXIS_STROKE_WIDTH, stroke_linecap="round"),
        group=group,
    )
    for value, x in ticks:
        scene.add(
            f"{group}-tick-{value}",
            text(
                x, 24, value,
                fill=colour,
                font_size=config.AXIS_FONT_SIZE,
                font_family=config.HAND_FONT,
                text_anchor="middle",
            ),
            group=group,
        )


# ============================================================
# RENDERER 1 - WHEN DID COUNTRIES FIRST TAKE PART
# ============================================================

def first_time_scales(schema: dict):
    m = config.FIRST_TIME_MARGIN
    width = config.FIRST_TIME_WIDTH
    x_scale = BandScale(schema["years"], (m["left"], width - m["right"]), padding=0.1)
    legend_scale = BandScale(schema["continents"], (width / 2.5, width / 1.8))
    return x_scale, legend_scale


def build_first_time_simulation(
    schema: dict,
    on_tick: Optional[TickCallback] = None,
    token: Optional[CancellationToken] = None,
) -> ForceSimulation:
    """
    Each country is pulled toward the middle of its first-year band.
    The group holding the circles is offset by FIRST_TIME_START, so the
    targets are expressed relative to it.
    """
    x_scale, _ = first_time_scales(schema)
    sx, sy = config.FIRST_TIME_START
    target_y = config.FIRST_TIME_HEIGHT / 1.6 - sy
    nodes = [
        SimNode(
            key=c["key"],
            target_x=x_scale.center(c["year"]) - sx,
            target_y=target_y,
            radius=config.FIRST_TIME_NODE_RADIUS,
            category=c["continent"],
        )
        for c in schema["countries"]
    ]
    return ForceSimulation(nodes, config.FIRST_TIME_FORCES, on_tick=on_tick, token=token)


def render_first_participation(
    schema: dict,
    legend: LegendFilter,
    positions: Dict[str, PlacedNode],
    frames: Optional[Sequence[Dict]] = None,
    played: bool = False,
) -> Scene:
    """
    ``played`` keeps the larger resting radius after the animation; pass
    ``frames`` only on the run that should animate.
    """
    m = config.FIRST_TIME_MARGIN
    width, height = config.FIRST_TIME_WIDTH, config.FIRST_TIME_HEIGHT
    x_scale, legend_scale = first_time_scales(schema)
    colours = config.CONTINENT_COLOURS

    scene = Scene(width, height)
    gradient = scene.add_gradient("asia-europe", colours["Asia"], colours["Europe"])

    # circles first so the axis and legend stay readable on top
    scene.group("nodes", _translate(*config.FIRST_TIME_START))
    scene.group("axis", _translate(0, height - m["bottom"]))
    scene.group("legend", _translate(0, m["top"]))

    radius = config.FIRST_TIME_PLAYED_RADIUS if played or frames else config.FIRST_TIME_NODE_RADIUS
    levels = legend.apply((c["key"], c["continent"]) for c in schema["countries"])
    for c in schema["countries"]:
        p = positions[c["key"]]
        paint = gradient if c["country"] in config.MULTI_CONTINENT_COUNTRIES else colours[c["continent"]]
        scene.add(
            c["key"],
            circle(p.x, p.y, radius, fill=paint, stroke=paint, stroke_width=3),
            group="nodes",
            tooltip=f"{escape(c['country'])} {c['year']}",
            opacity=levels[c["key"]],
            category=c["continent"],
        )

    _hand_axis(scene, "axis", x_scale.ticks(), x_scale.range[0], x_scale.range[1], config.BLUE)

    scene.add(
        "legend-title",
        text(
            width / 2.5 - 25, -28,
            "each circle = country, coloured by continent; pick a continent to filter",
            fill=config.BLUE,
            font_family=config.HAND_FONT,
            font_size=16,
        ),
        group="legend",
    )
    for continent, cx in legend_scale.ticks():
        level = legend.opacity_for(continent)
        colour = colours[continent]
        scene.add(
            f"legend-{continent}",
            circle(cx, 0, 10, fill=colour, stroke=colour, stroke_width=3),
            group="legend",
            opacity=level,
            category=continent,
        )
        scene.add(
            f"legend-label-{continent}",
            text(
                0, 0, config.CONTINENT_LABELS.get(continent, continent),
                transform=f"translate({round(cx, 2)}, 45) rotate(-30)",
                text_anchor="end",
                fill=colour,
                font_family=config.HAND_FONT,
                font_size=18,
                opacity=level.stroke if level == legend.highlighted else level.fill,
            ),
            group="legend",
            category=continent,
        )

    if frames:
        scene.set_frames(frames, radius=config.FIRST_TIME_PLAYED_RADIUS)
    return scene


# ============================================================
# RENDERER 2 - ENVIRONMENTAL SUSTAINABILITY TIMELINE
# ============================================================

def render_sustainability_timeline(schema: dict) -> Scene:
    m = config.TIMELINE_MARGIN
    width, height = config.TIMELINE_WIDTH, config.TIMELINE_HEIGHT
    x_scale = PointScale(schema["years"], (m["left"], width - m["right"]))
    pos, neg = config.TIMELINE_POSITIVE, config.TIMELINE_NEGATIVE
    axis_y = height / 1.5

    scene = Scene(width, height, background=config.INK)
    scene.group("events", _translate(0, axis_y))
    scene.group("axis", _translate(0, axis_y))
    scene.group("legend")

    for ev in schema["events"]:
        x = x_scale(ev["year"])
        y = ev["offset"]
        colour = neg if ev["polarity"] == "negative" else pos

        scene.add(
            f"{ev['key']}-stem",
            line(x, 0, x, y, stroke="white", stroke_width=3, stroke_opacity=0.5, stroke_dasharray="1 1"),
            group="events",
        )
        scene.add_sketchy(
            f"{ev['key']}-sketch",
            CirclePrimitive(x, y, config.TIMELINE_EVENT_DIAMETER),
            SketchStyle(
                stroke=colour,
                stroke_width=1.7,
                fill_style="cross-hatch" if ev["olympics"] else "zigzag-line",
                fill=colour,
                roughness=2,
            ),
            group="events",
        )
        # plain circle on top, only there to catch the pointer
        scene.add(
            ev["key"],
            circle(x, y, config.TIMELINE_EVENT_DIAMETER / 2, fill=colour, opacity=0.5),
            group="events",
            tooltip=f"<b>{escape(str(ev['year']))}: {escape(ev['event'])}</b><br/>{escape(ev['notes'])}",
            category=ev["polarity"],
        )

    _hand_axis(scene, "axis", [(y, x_scale(y)) for y in schema["years"]], m["left"], width - m["right"], config.GREEN)

    for key, label, colour, cx, tx in (
        ("positive", "positive outcome", pos, width - m["right"] - 160, width - m["right"] - 290),
        ("negative", "negative outcome", neg, width - m["right"], width - m["right"] - 130),
    ):
        scene.add_sketchy(
            f"legend-{key}",
            CirclePrimitive(cx, m["top"], 20),
            SketchStyle(stroke=colour, stroke_width=1, fill_style="cross-hatch", fill=colour, roughness=1.7),
            group="legend",
        )
        scene.add(
            f"legend-label-{key}",
            text(tx, m["top"], label, fill=colour, dy="0.35em", font_family=config.HAND_FONT, font_size=16),
            group="legend",
        )
    return scene


# ============================================================
# RENDERER 3 - GENDER SPLIT PIES
# ============================================================

MALE_STYLE = SketchStyle(
    stroke=config.COLOUR_MALE, stroke_width=1, fill_style="cross-hatch", fill=config.COLOUR_MALE, roughness=2.5
)
FEMALE_STYLE = SketchStyle(
    stroke=config.COLOUR_FEMALE, stroke_width=0.8, fill_style="zigzag", fill=config.COLOUR_FEMALE, roughness=2.2
)
GENDER_STYLES = {"male": MALE_STYLE, "female": FEMALE_STYLE}


def grid_position(i: int, per_row: int = config.PIES_PER_ROW, size: float = config.PIE_SIZE):
    return (i % per_row + 0.5) * size, (i // per_row + 0.5) * size


def gender_arcs(slices: List[Dict], inner_radius: float, outer_radius: float):
    return pie(
        slices,
        value=lambda d: d["percentage"],
        label=lambda d: d["gender"],
        pad_angle=config.PIE_PAD_ANGLE,
        inner_radius=inner_radius,
        outer_radius=outer_radius,
    )


def render_gender_pies(schema: dict) -> Scene:
    scene = Scene(config.PIES_WIDTH, config.PIES_HEIGHT)
    scene.group("legend")

    for i, gender in enumerate(("female", "male")):
        colour = GENDER_STYLES[gender].fill
        x = i * 150 + 50
        scene.add(f"legend-{gender}", rect(x, 0, 70, 25, fill=colour, rx=10, ry=10), group="legend")
        scene.add(
            f"legend-label-{gender}",
            text(x + 10, 12, gender, fill="white", dy="0.35em", font_size=14, font_family="sans-serif"),
            group="legend",
        )

    for i, entry in enumerate(schema["years"]):
        year = entry["year"]
        gx, gy = grid_position(i)
        group = scene.group(f"pie-{year}", _translate(gx, gy + 70))

        female = next(s["percentage"] for s in entry["slices"] if s["gender"] == "female")
        scene.add(
            f"pie-{year}-label",
            text(0, 0, year, dy="0.35em", text_anchor="middle", fill=config.COLOUR_FEMALE, font_family=config.HAND_FONT, font_size=18),
            group=group,
        )
        for arc in gender_arcs(entry["slices"], config.PIE_INNER_RADIUS, config.PIE_OUTER_RADIUS):
            d = arc_path(arc, config.PIE_CORNER_RADIUS)
            if not d:
                # a 0% slice has nothing to draw
                continue
            scene.add_sketchy(f"pie-{year}-{arc.category}", PathPrimitive(d), GENDER_STYLES[arc.category], group=group)
        scene.add(
            f"pie-{year}-hit",
            circle(0, 0, config.PIE_OUTER_RADIUS, fill="white", fill_opacity=0),
            group=group,
            tooltip=f"{year}: about {female:g}% of athletes were women",
        )
    return scene


def render_reveal_pie() -> Scene:
    """The 50/50 guess shown before the real split is revealed."""
    size = config.REVEAL_PIE_SIZE
    scene = Scene(size, size)
    group = scene.group("pie", _translate(size / 2, size / 2))
    guess = [{"gender": "male", "percentage": 50}, {"gender": "female", "percentage": 50}]
    arcs = gender_arcs(guess, config.REVEAL_INNER_RADIUS, size / 2 - 10)

    # drawn twice for a heavier pencil line
    for stroke_pass in (1, 2):
        for arc in arcs:
            scene.add_sketchy(
                f"reveal-{arc.category}-{stroke_pass}",
                PathPrimitive(arc_path(arc, config.PIE_CORNER_RADIUS)),
                GENDER_STYLES[arc.category],
                group=group,
            )

    button = scene.group("button", _translate(size / 2, size / 2))
    scene.add(
        "reveal-button",
        circle(0, 0, 40, fill="white", stroke=config.REVEAL_BUTTON_COLOUR, stroke_width=5),
        group=button,
    )
    scene.add(
        "reveal-button-label",
        text(0, 0, "show", fill=config.REVEAL_BUTTON_COLOUR, dy="0.35em", text_anchor="middle", font_size=20),
        group=button,
    )
    return scene


# ============================================================
# RENDERER 4 - PARALYMPICS
# ============================================================

def paralympics_scales(schema: dict):
    m = config.PARA_MARGIN
    width, height = config.PARA_WIDTH, config.PARA_HEIGHT
    x_scale = BandScale(schema["years"], (m["left"], width - m["right"]), padding=0.1)
    top = max((g["competitors"] for g in schema["games"]), default=0)
    y_scale = LinearScale((0, top), (height / 2, m["top"]))
    return x_scale, y_scale


def build_sports_simulation(
    schema: dict,
    on_tick: Optional[TickCallback] = None,
    token: Optional[CancellationToken] = None,
) -> ForceSimulation:
    x_scale, _ = paralympics_scales(schema)
    nodes = [
        SimNode(
            key=e["key"],
            target_x=x_scale.center(e["year"]),
            target_y=e["row"] * 2 + 100,
            radius=config.PARA_SPORT_RADIUS,
            category=e["sport"],
        )
        for e in schema["entries"]
    ]
    return ForceSimulation(nodes, config.PARA_SPORT_FORCES, on_tick=on_tick, token=token)


ANNOTATION_TITLE = "Beginnings: 1948"
ANNOTATION_LINES = (
    "The Paralympics developed after Sir Ludwig Guttmann",
    "organized a sports competition for British World War II",
    "veterans with spinal cord injuries in England in 1948.",
)


def render_paralympics(
    schema: dict,
    positions: Dict[str, PlacedNode],
    frames: Optional[Sequence[Dict]] = None,
) -> Scene:
    m = config.PARA_MARGIN
    width, height = config.PARA_WIDTH, config.PARA_HEIGHT
    x_scale, y_scale = paralympics_scales(schema)
    sport_colours = dict(zip(schema["sports"], color_ramp(config.PARA_SPORTS_LOW, config.PARA_SPORTS_HIGH, len(schema["sports"]))))
    bar = config.PARA_BARS_COLOUR

    scene = Scene(width, height + 160)
    scene.group("athletes", _translate(0, m["top"]))
    scene.group("sports", _translate(0, m["top"] + height / 2))
    scene.group("axis", _translate(0, height / 2 + m["top"]))
    scene.group("annotation")

    bandwidth = x_scale.bandwidth()
    for g in schema["games"]:
        x = x_scale(g["year"])
        y = y_scale(g["competitors"])
        h = y_scale(0) - y
        scene.add_sketchy(
            f"bar-{g['year']}-sketch",
            RectPrimitive(x, y, bandwidth, h),
            SketchStyle(stroke=bar, stroke_width=1.3, fill_style="cross-hatch", fill=bar, roughness=1.5),
            group="athletes",
        )
        scene.add(
            f"bar-{g['year']}",
            rect(x, y, bandwidth, h, fill=bar, fill_opacity=0.4),
            group="athletes",
            tooltip=(
                f"host: {escape(g['host'])}<br/>nations: {g['nations']}<br/>competitors: {g['competitors']}"
            ),
        )

    for e in schema["entries"]:
        p = positions[e["key"]]
        colour = sport_colours[e["sport"]]
        scene.add(
            e["key"],
            circle(p.x, p.y, config.PARA_SPORT_RADIUS, fill=colour, fill_opacity=0.85, stroke=colour, stroke_width=2),
            group="sports",
            tooltip=f"{escape(e['sport'])} ({e['year']})",
            category=e["sport"],
        )

    _hand_axis(scene, "axis", x_scale.ticks(), m["left"], width - m["right"], config.BLUE)

    # callout: curve from the first bar up to the note
    scene.add(
        "annotation-connector",
        path("M10,310 Q20,230 60,190", stroke=bar, fill="none", stroke_width=1.5),
        group="annotation",
    )
    scene.add(
        "annotation-title",
        text(70, 110, ANNOTATION_TITLE, fill=config.PINK, font_size=16, font_weight="bold"),
        group="annotation",
    )
    for i, row in enumerate(ANNOTATION_LINES):
        scene.add(
            f"annotation-line-{i}",
            text(70, 132 + i * 18, row, fill=config.PINK, font_size=14),
            group="annotation",
        )
    scene.add("label-top", text(width - 10, m["top"], "participants", text_anchor="end", fill=bar, font_family=config.HAND_FONT, font_size=20), group="annotation")
    scene.add("label-bottom", text(width - 10, height / 2 + m["top"] + 60, "sports", text_anchor="end", fill=config.PINK, font_family=config.HAND_FONT, font_size=20), group="annotation")

    if frames:
        scene.set_frames(frames)
    return scene

# -*- coding: utf-8 -*-
"""
Hand-drawn rendering, retained mode.

Renderers never touch the page. They fill a ``Scene``: an ordered list of
keyed items grouped into layers. Sketchy items are ``Drawable``s produced
by ``render_sketchy`` and drawn in the browser by rough.js; plain items
(hit targets, axis labels, stems) are ``Mark``s. ``build_scene_html``
serialises the scene into the HTML shell, which is what Streamlit embeds.

A Drawable is frozen. A redraw builds a new scene; nothing is patched.
"""
from __future__ import annotations

import json
import logging
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from legend_filter import OpacityLevel

logger = logging.getLogger(__name__)

SCENE_PLACEHOLDER = "// __SCENE_PLACEHOLDER__"


# ============================================================
# PRIMITIVES + STYLE
# ============================================================

@dataclass(frozen=True)
class PathPrimitive:
    d: str


@dataclass(frozen=True)
class RectPrimitive:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CirclePrimitive:
    cx: float
    cy: float
    diameter: float


Primitive = Union[PathPrimitive, RectPrimitive, CirclePrimitive]


@dataclass(frozen=True)
class SketchStyle:
    stroke: str
    stroke_width: float = 1.0
    fill_style: str = "hachure"
    fill: Optional[str] = None
    roughness: float = 1.0

    def to_options(self, seed: Optional[int] = None) -> Dict[str, Any]:
        opts: Dict[str, Any] = {
            "stroke": self.stroke,
            "strokeWidth": self.stroke_width,
            "fillStyle": self.fill_style,
            "roughness": self.roughness,
        }
        if self.fill is not None:
            opts["fill"] = self.fill
        if seed is not None:
            opts["seed"] = seed
        return opts


@dataclass(frozen=True)
class Drawable:
    """One rough.js call: ``rc[shape](*args, options)``."""
    shape: str
    args: Tuple[Any, ...]
    options: Tuple[Tuple[str, Any], ...]

    def to_json(self) -> Dict[str, Any]:
        return {"kind": "rough", "shape": self.shape, "args": list(self.args), "options": dict(self.options)}


def stable_seed(key: str) -> int:
    """Same key, same wobble: reruns redraw an identical sketch."""
    return zlib.crc32(key.encode("utf-8")) % 2_000_000_000 + 1


def render_sketchy(primitive: Primitive, style: SketchStyle, seed: Optional[int] = None) -> Drawable:
    options = tuple(sorted(style.to_options(seed).items()))
    if isinstance(primitive, PathPrimitive):
        return Drawable("path", (primitive.d,), options)
    if isinstance(primitive, RectPrimitive):
        return Drawable("rectangle", (primitive.x, primitive.y, primitive.width, primitive.height), options)
    if isinstance(primitive, CirclePrimitive):
        return Drawable("circle", (primitive.cx, primitive.cy, primitive.diameter), options)
    raise TypeError(f"not a sketchable primitive: {primitive!r}")


# ============================================================
# PLAIN MARKS
# ============================================================

@dataclass(frozen=True)
class Mark:
    """A plain SVG element: tag, attributes and optional text."""
    tag: str
    attrs: Tuple[Tuple[str, Any], ...] = ()
    text: Optional[str] = None

    @classmethod
    def make(cls, tag: str, text: Optional[str] = None, **attrs) -> "Mark":
        clean = tuple((k.replace("_", "-"), v) for k, v in attrs.items() if v is not None)
        return cls(tag, clean, text)

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": "mark", "tag": self.tag, "attrs": dict(self.attrs)}
        if self.text is not None:
            out["text"] = self.text
        return out


def circle(cx, cy, r, **attrs) -> Mark:
    return Mark.make("circle", cx=round(cx, 2), cy=round(cy, 2), r=r, **attrs)


def rect(x, y, width, height, **attrs) -> Mark:
    return Mark.make("rect", x=round(x, 2), y=round(y, 2), width=round(width, 2), height=round(height, 2), **attrs)


def line(x1, y1, x2, y2, **attrs) -> Mark:
    return Mark.make("line", x1=x1, y1=y1, x2=x2, y2=y2, **attrs)


def text(x, y, content, **attrs) -> Mark:
    return Mark.make("text", text=str(content), x=round(x, 2), y=round(y, 2), **attrs)


def path(d, **attrs) -> Mark:
    return Mark.make("path", d=d, **attrs)


# ============================================================
# SCENE
# ============================================================

Element = Union[Drawable, Mark]


@dataclass(frozen=True)
class SceneItem:
    key: str
    element: Element
    group: str
    tooltip: Optional[str] = None
    opacity: Optional[OpacityLevel] = None
    category: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        out = self.element.to_json()
        out["key"] = self.key
        if self.tooltip:
            out["tooltip"] = self.tooltip
        if self.opacity is not None:
            out["fillOpacity"] = self.opacity.fill
            out["strokeOpacity"] = self.opacity.stroke
        if self.category is not None:
            out["category"] = self.category
        return out


@dataclass
class Scene:
    width: float
    height: float
    background: Optional[str] = None
    groups: Dict[str, Optional[str]] = field(default_factory=dict)
    items: List[SceneItem] = field(default_factory=list)
    gradients: List[Dict[str, str]] = field(default_factory=list)
    frames: Optional[Dict[str, Any]] = None
    _keys: set = field(default_factory=set, init=False, repr=False)

    def group(self, name: str, transform: Optional[str] = None) -> str:
        self.groups[name] = transform
        return name

    def add(
        self,
        key: str,
        element: Element,
        group: str = "main",
        tooltip: Optional[str] = None,
        opacity: Optional[OpacityLevel] = None,
        category: Optional[str] = None,
    ) -> SceneItem:
        if key in self._keys:
            raise ValueError(f"duplicate scene key: {key}")
        self.groups.setdefault(group, None)
        item = SceneItem(key, element, group, tooltip, opacity, category)
        self._keys.add(key)
        self.items.append(item)
        return item

    def add_sketchy(self, key: str, primitive: Primitive, style: SketchStyle, group: str = "main", **kwargs) -> SceneItem:
        return self.add(key, render_sketchy(primitive, style, seed=stable_seed(key)), group, **kwargs)

    def add_gradient(self, gradient_id: str, start: str, end: str) -> str:
        self.gradients.append({"id": gradient_id, "start": start, "end": end})
        return f"url(#{gradient_id})"

    def set_frames(self, frames: Sequence[Dict[str, Tuple[float, float]]], radius: Optional[float] = None, interval_ms: int = 30) -> None:
        """Positions per frame for circle marks, replayed by the browser."""
        self.frames = {"frames": list(frames), "radius": radius, "interval": interval_ms}

    def keys(self) -> List[str]:
        return [it.key for it in self.items]

    def get(self, key: str) -> SceneItem:
        for it in self.items:
            if it.key == key:
                return it
        raise KeyError(key)

    def by_group(self, group: str) -> List[SceneItem]:
        return [it for it in self.items if it.group == group]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "background": self.background,
            "gradients": self.gradients,
            "groups": [
                {"id": name, "transform": transform, "items": [it.to_json() for it in self.by_group(name)]}
                for name, transform in self.groups.items()
            ],
            "frames": self.frames,
        }


def empty_scene(width: float, height: float, message: str) -> Scene:
    scene = Scene(width, height)
    scene.add("empty-message", text(width / 2, height / 2, message, text_anchor="middle", fill="#888"), group="message")
    return scene


# ============================================================
# HTML SHELL
# ============================================================

def scene_to_script(scene: Scene) -> str:
    payload = json.dumps(scene.to_payload(), separators=(",", ":"))
    # keep "</script>" inside strings from closing the tag
    return "var scene = " + payload.replace("</", "<\\/") + ";"


def build_scene_html(scene: Scene, template: str) -> str:
    if SCENE_PLACEHOLDER not in template:
        raise ValueError("HTML template has no scene placeholder")
    logger.debug("embedding scene %sx%s with %d items", scene.width, scene.height, len(scene.items))
    return template.replace(SCENE_PLACEHOLDER, scene_to_script(scene))


def load_template(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")

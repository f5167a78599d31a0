# -*- coding: utf-8 -*-
"""
Pie geometry: values -> ordered arc slices -> SVG path strings.

Angles are in radians, measured clockwise from 12 o'clock, which is how
SVG pies are usually laid out. Slices keep their input order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from errors import DegenerateInput

TAU = 2 * math.pi
EPSILON = 1e-12


@dataclass(frozen=True)
class ArcSlice:
    category: str
    value: float
    start_angle: float
    end_angle: float
    pad_angle: float = 0.0
    inner_radius: float = 0.0
    outer_radius: float = 0.0
    index: int = 0

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2

    @property
    def padded_start(self) -> float:
        if self.span <= self.pad_angle:
            return self.mid_angle
        return self.start_angle + self.pad_angle / 2

    @property
    def padded_end(self) -> float:
        if self.span <= self.pad_angle:
            return self.mid_angle
        return self.end_angle - self.pad_angle / 2

    @property
    def padded_span(self) -> float:
        return self.padded_end - self.padded_start


def pie(
    items: Iterable[Any],
    value: Callable[[Any], float] = lambda d: d["value"],
    label: Callable[[Any], str] = lambda d: d["label"],
    pad_angle: float = 0.0,
    inner_radius: float = 0.0,
    outer_radius: float = 0.0,
) -> List[ArcSlice]:
    """
    Lays ``items`` around the circle in input order, starting at angle 0.

    Each slice spans ``2*pi * value / total``. Raises ``DegenerateInput``
    for negative values or when nothing is positive.
    """
    items = list(items)
    values = [float(value(d)) for d in items]
    if any(v < 0 or math.isnan(v) for v in values):
        raise DegenerateInput("pie values must be non-negative numbers")
    total = sum(values)
    if total <= 0:
        raise DegenerateInput("pie needs at least one positive value")

    slices = []
    angle = 0.0
    for i, (d, v) in enumerate(zip(items, values)):
        end = TAU if i == len(items) - 1 else angle + TAU * v / total
        slices.append(
            ArcSlice(
                category=str(label(d)),
                value=v,
                start_angle=angle,
                end_angle=end,
                pad_angle=pad_angle,
                inner_radius=inner_radius,
                outer_radius=outer_radius,
                index=i,
            )
        )
        angle = end
    return slices


# ============================================================
# PATHS
# ============================================================

def _polar(r: float, a: float) -> tuple:
    # clockwise from 12 o'clock, y grows downwards
    return r * math.sin(a), -r * math.cos(a)


def _fmt(v: float) -> str:
    out = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out


def _arc_cmd(r: float, a0: float, a1: float, sweep: int) -> str:
    x, y = _polar(r, a1)
    large = 1 if abs(a1 - a0) > math.pi else 0
    return f"A{_fmt(r)},{_fmt(r)},0,{large},{sweep},{_fmt(x)},{_fmt(y)}"


def arc_path(arc: ArcSlice, corner_radius: float = 0.0) -> str:
    """
    SVG ``d`` for a padded annular sector centred on the origin.

    ``corner_radius`` only softens the four corners of the drawn outline;
    the slice angles are left untouched.
    """
    r0, r1 = arc.inner_radius, arc.outer_radius
    a0, a1 = arc.padded_start, arc.padded_end
    if r1 <= 0 or a1 - a0 <= EPSILON:
        return ""

    full = a1 - a0 >= TAU - EPSILON
    if full:
        # two half arcs, one full ring
        mid = a0 + math.pi
        x0, y0 = _polar(r1, a0)
        d = f"M{_fmt(x0)},{_fmt(y0)}{_arc_cmd(r1, a0, mid, 1)}{_arc_cmd(r1, mid, a1, 1)}"
        if r0 > 0:
            xi, yi = _polar(r0, a1)
            d += f"M{_fmt(xi)},{_fmt(yi)}{_arc_cmd(r0, a1, mid, 0)}{_arc_cmd(r0, mid, a0, 0)}"
        return d + "Z"

    cr = max(0.0, min(corner_radius, (r1 - r0) / 2))
    # corners cannot eat more than half of the arc length
    cut_outer = min(cr / r1, (a1 - a0) / 2) if cr else 0.0
    cut_inner = min(cr / r0, (a1 - a0) / 2) if cr and r0 > 0 else 0.0

    parts = []
    start = _polar(r1 - cr, a0) if cr else _polar(r1, a0)
    parts.append(f"M{_fmt(start[0])},{_fmt(start[1])}")
    if cr:
        cx, cy = _polar(r1, a0)
        ex, ey = _polar(r1, a0 + cut_outer)
        parts.append(f"Q{_fmt(cx)},{_fmt(cy)},{_fmt(ex)},{_fmt(ey)}")
    parts.append(_arc_cmd(r1, a0 + cut_outer, a1 - cut_outer, 1))
    if cr:
        cx, cy = _polar(r1, a1)
        ex, ey = _polar(r1 - cr, a1)
        parts.append(f"Q{_fmt(cx)},{_fmt(cy)},{_fmt(ex)},{_fmt(ey)}")

    if r0 > 0:
        if cr:
            sx, sy = _polar(r0 + cr, a1)
            parts.append(f"L{_fmt(sx)},{_fmt(sy)}")
            cx, cy = _polar(r0, a1)
            ex, ey = _polar(r0, a1 - cut_inner)
            parts.append(f"Q{_fmt(cx)},{_fmt(cy)},{_fmt(ex)},{_fmt(ey)}")
        else:
            sx, sy = _polar(r0, a1)
            parts.append(f"L{_fmt(sx)},{_fmt(sy)}")
        parts.append(_arc_cmd(r0, a1 - cut_inner, a0 + cut_inner, 0))
        if cr:
            cx, cy = _polar(r0, a0)
            ex, ey = _polar(r0 + cr, a0)
            parts.append(f"Q{_fmt(cx)},{_fmt(cy)},{_fmt(ex)},{_fmt(ey)}")
    else:
        parts.append("L0,0")

    parts.append("Z")
    return "".join(parts)


def label_point(arc: ArcSlice, radius: Optional[float] = None) -> tuple:
    """Position on the slice's mid-angle, halfway through the ring by default."""
    r = radius if radius is not None else (arc.inner_radius + arc.outer_radius) / 2
    return _polar(r, arc.mid_angle)

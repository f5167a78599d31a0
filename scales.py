# -*- coding: utf-8 -*-
"""
Scales: map a data domain onto a pixel range.

- BandScale  : discrete domain -> equal, optionally padded slots
- PointScale : discrete domain -> zero-width points
- LinearScale: continuous domain -> continuous range (extrapolates)

All scales are immutable once built and can be shared by every draw of a
render pass.
"""
from __future__ import annotations

from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from errors import DegenerateInput


def _unique(values: Iterable[Hashable]) -> List[Hashable]:
    seen = set()
    out = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


# ============================================================
# BAND / POINT
# ============================================================

class BandScale:
    """
    Splits ``range_`` into one slot per distinct domain value.

    ``padding`` is a fraction of the step and is applied both between
    slots and at the two outer edges; leftover space is centred.
    """

    def __init__(
        self,
        domain: Iterable[Hashable],
        range_: Tuple[float, float],
        padding: float = 0.0,
        *,
        padding_inner: Optional[float] = None,
        padding_outer: Optional[float] = None,
        align: float = 0.5,
    ):
        self.domain: Tuple[Hashable, ...] = tuple(_unique(domain))
        self.range: Tuple[float, float] = (float(range_[0]), float(range_[1]))
        self.padding_inner = padding if padding_inner is None else padding_inner
        self.padding_outer = padding if padding_outer is None else padding_outer
        self.align = align
        self._index = {v: i for i, v in enumerate(self.domain)}

        n = len(self.domain)
        start, stop = self.range
        reverse = stop < start
        if reverse:
            start, stop = stop, start

        step = (stop - start) / max(1.0, n - self.padding_inner + self.padding_outer * 2)
        start += (stop - start - step * (n - self.padding_inner)) * self.align
        self._step = step
        self._bandwidth = step * (1 - self.padding_inner)

        positions = [start + step * i for i in range(n)]
        if reverse:
            positions.reverse()
        self._positions = positions

    def __call__(self, value: Hashable) -> Optional[float]:
        if not self.domain:
            raise DegenerateInput("band scale has an empty domain")
        i = self._index.get(value)
        if i is None:
            return None
        return self._positions[i]

    def bandwidth(self) -> float:
        return self._bandwidth

    def step(self) -> float:
        return self._step

    def center(self, value: Hashable) -> Optional[float]:
        """Middle of the slot for ``value``."""
        start = self(value)
        if start is None:
            return None
        return start + self._bandwidth / 2

    def ticks(self) -> List[Tuple[Hashable, float]]:
        """(value, centre) pairs, as an axis would label them."""
        return [(v, self.center(v)) for v in self.domain]

    def __repr__(self) -> str:
        return f"BandScale(n={len(self.domain)}, range={self.range}, bandwidth={self._bandwidth:.3f})"


class PointScale(BandScale):
    """A band scale whose slots have no width. ``padding`` is outer-only."""

    def __init__(self, domain: Iterable[Hashable], range_: Tuple[float, float], padding: float = 0.0, align: float = 0.5):
        super().__init__(domain, range_, padding_inner=1.0, padding_outer=padding, align=align)

    def __repr__(self) -> str:
        return f"PointScale(n={len(self.domain)}, range={self.range})"


def band_scale(domain: Sequence[Hashable], range_: Tuple[float, float], padding: float = 0.0) -> BandScale:
    return BandScale(domain, range_, padding)


def point_scale(domain: Sequence[Hashable], range_: Tuple[float, float], padding: float = 0.0) -> PointScale:
    return PointScale(domain, range_, padding)


# ============================================================
# LINEAR
# ============================================================

class LinearScale:
    """Affine map from ``domain`` to ``range_``. Extrapolates unless ``clamp``."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float], clamp: bool = False):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))
        self.clamp = clamp

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # collapsed domain: everything sits in the middle of the range
            return (r0 + r1) / 2
        t = (float(value) - d0) / (d1 - d0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        t = (float(pixel) - r0) / (r1 - r0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return d0 + t * (d1 - d0)

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range}, clamp={self.clamp})"


def linear_scale(domain_min: float, domain_max: float, range_min: float, range_max: float) -> LinearScale:
    return LinearScale((domain_min, domain_max), (range_min, range_max))


# ============================================================
# COLOUR RAMP
# ============================================================

def _hex_to_rgb(colour: str) -> Tuple[int, int, int]:
    c = colour.lstrip("#")
    if len(c) == 3:
        c = "".join(ch * 2 for ch in c)
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def lerp_colour(c1: str, c2: str, t: float) -> str:
    a = _hex_to_rgb(c1)
    b = _hex_to_rgb(c2)
    rgb = [round(x + (y - x) * t) for x, y in zip(a, b)]
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def color_ramp(start: str, end: str, n: int) -> List[str]:
    """``n`` colours evenly spaced from ``start`` to ``end`` (inclusive)."""
    if n <= 0:
        return []
    if n == 1:
        return [lerp_colour(start, start, 0.0)]
    return [lerp_colour(start, end, i / (n - 1)) for i in range(n)]

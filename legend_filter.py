# -*- coding: utf-8 -*-
"""
Legend filter: at most one category is emphasised at a time.

    Unfiltered      --click(c)-->      FilteredBy(c)
    FilteredBy(a)   --click(b)-->      FilteredBy(b)   (replaces, never a union)
    FilteredBy(c)   --click(c)-->      FilteredBy(c)   (no change)
    FilteredBy(*)   --click outside--> Unfiltered
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Optional, Tuple, Union

from errors import DegenerateInput


@dataclass(frozen=True)
class OpacityLevel:
    fill: float
    stroke: float


DEFAULT_HIGHLIGHTED = OpacityLevel(fill=0.8, stroke=1.0)
DEFAULT_DIMMED = OpacityLevel(fill=0.06, stroke=0.1)


@dataclass(frozen=True)
class LegendClick:
    """A click that landed on a legend item."""
    category: str


@dataclass(frozen=True)
class OutsideClick:
    """A click on the chart background, away from any legend item."""


ClickTarget = Union[LegendClick, OutsideClick]


class LegendFilter:
    def __init__(
        self,
        categories: Iterable[str],
        highlighted: OpacityLevel = DEFAULT_HIGHLIGHTED,
        dimmed: OpacityLevel = DEFAULT_DIMMED,
    ):
        self.categories: Tuple[str, ...] = tuple(dict.fromkeys(categories))
        self.highlighted = highlighted
        self.dimmed = dimmed
        self._selected: Optional[str] = None

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    @property
    def is_filtered(self) -> bool:
        return self._selected is not None

    def select(self, category: str) -> bool:
        """Legend item click. Returns True when the selection changed."""
        if category not in self.categories:
            raise DegenerateInput(f"unknown legend category: {category!r}")
        if category == self._selected:
            return False
        self._selected = category
        return True

    def clear(self) -> bool:
        """Outside click. Returns True when a filter was removed."""
        if self._selected is None:
            return False
        self._selected = None
        return True

    def handle(self, target: ClickTarget) -> bool:
        if isinstance(target, LegendClick):
            return self.select(target.category)
        if isinstance(target, OutsideClick):
            return self.clear()
        raise TypeError(f"unsupported click target: {target!r}")

    def opacity_for(self, category: str) -> OpacityLevel:
        if self._selected is None or category == self._selected:
            return self.highlighted
        return self.dimmed

    def apply(self, elements: Iterable[Tuple[Hashable, str]]) -> Dict[Hashable, OpacityLevel]:
        """Opacity for each ``(key, category)`` pair, keyed by element."""
        return {key: self.opacity_for(category) for key, category in elements}

    def __repr__(self) -> str:
        state = f"FilteredBy({self._selected!r})" if self._selected else "Unfiltered"
        return f"LegendFilter({state})"

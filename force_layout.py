# -*- coding: utf-8 -*-
"""
Force layout: places circles near a target point without overlapping.

The physics lives in a pure stepper, ``tick(state, config) -> state``,
so it can be driven by any scheduler and tested on its own.
``ForceSimulation`` wraps the stepper with the Idle -> Running -> Stopped
lifecycle, a per-tick callback and a cancellation token.

Per tick:
    alpha += (alpha_target - alpha) * alpha_decay
    v     += (target - pos) * strength * alpha          (x and y pulls)
    v     += collision push for overlapping pairs        (relaxation)
    v     *= 1 - velocity_decay
    pos   += v
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


# ============================================================
# DATA
# ============================================================

@dataclass
class SimNode:
    """One circle. ``radius`` is the collision radius."""
    key: str
    target_x: float
    target_y: float
    radius: float = 5.0
    category: str = ""
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0


@dataclass(frozen=True)
class PlacedNode:
    """Read-only snapshot of a node, handed to callbacks and renderers."""
    key: str
    x: float
    y: float
    radius: float
    category: str = ""


@dataclass(frozen=True)
class ForceConfig:
    x_strength: float = 0.1
    y_strength: float = 0.1
    collide_strength: float = 1.0
    collide_iterations: int = 1
    # overrides every node's own radius when set
    collision_radius: Optional[float] = None
    alpha_start: float = 1.0
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    max_ticks: int = 5000
    seed: int = 0

    def __post_init__(self):
        for name in ("x_strength", "y_strength", "collide_strength"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {v}")
        if not 0.0 <= self.alpha_decay < 1.0:
            raise ValueError(f"alpha_decay must be within [0, 1), got {self.alpha_decay}")
        if self.max_ticks < 0:
            raise ValueError("max_ticks must be >= 0")


@dataclass(frozen=True)
class SimulationState:
    """Immutable snapshot of all node arrays plus the cooling schedule."""
    x: np.ndarray
    y: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    target_x: np.ndarray
    target_y: np.ndarray
    radius: np.ndarray
    alpha: float = 1.0
    ticks: int = 0

    @property
    def size(self) -> int:
        return int(self.x.shape[0])


def initial_positions(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Phyllotaxis spiral around the origin, same as an unset force layout."""
    i = np.arange(n, dtype=float)
    r = INITIAL_RADIUS * np.sqrt(0.5 + i)
    a = i * INITIAL_ANGLE
    return r * np.cos(a), r * np.sin(a)


def state_from_nodes(nodes: Sequence[SimNode], config: ForceConfig, alpha: Optional[float] = None) -> SimulationState:
    n = len(nodes)
    spiral_x, spiral_y = initial_positions(n)
    x = np.array([spiral_x[i] if nd.x is None else nd.x for i, nd in enumerate(nodes)], dtype=float)
    y = np.array([spiral_y[i] if nd.y is None else nd.y for i, nd in enumerate(nodes)], dtype=float)
    if config.collision_radius is not None:
        radius = np.full(n, float(config.collision_radius))
    else:
        radius = np.array([nd.radius for nd in nodes], dtype=float)
    return SimulationState(
        x=x,
        y=y,
        vx=np.array([nd.vx for nd in nodes], dtype=float),
        vy=np.array([nd.vy for nd in nodes], dtype=float),
        target_x=np.array([nd.target_x for nd in nodes], dtype=float),
        target_y=np.array([nd.target_y for nd in nodes], dtype=float),
        radius=radius,
        alpha=config.alpha_start if alpha is None else alpha,
    )


# ============================================================
# STEPPER
# ============================================================

def _collide(x, y, vx, vy, radius, strength, rng):
    n = x.shape[0]
    if n < 2:
        return vx, vy

    px = x + vx
    py = y + vy
    dx = px[:, None] - px[None, :]
    dy = py[:, None] - py[None, :]
    reach = radius[:, None] + radius[None, :]
    off_diag = ~np.eye(n, dtype=bool)

    coincident = (dx == 0) & (dy == 0) & off_diag
    if coincident.any():
        jiggle = np.triu((rng.random((n, n)) - 0.5) * 1e-6, 1)
        jiggle = jiggle - jiggle.T
        dx = np.where(coincident, jiggle, dx)

    dist2 = dx * dx + dy * dy
    overlap = (dist2 < reach * reach) & off_diag
    if not overlap.any():
        return vx, vy

    dist = np.sqrt(np.where(overlap, dist2, 1.0))
    push = np.where(overlap, (reach - dist) / dist * strength, 0.0)
    r2 = radius * radius
    # each node moves by the share of the other node's weight
    share = r2[None, :] / (r2[:, None] + r2[None, :])
    vx = vx + (dx * push * share).sum(axis=1)
    vy = vy + (dy * push * share).sum(axis=1)
    return vx, vy


def tick(state: SimulationState, config: ForceConfig, rng: Optional[np.random.Generator] = None) -> SimulationState:
    """Advance ``state`` by one tick. The input state is left untouched."""
    if rng is None:
        rng = np.random.default_rng(config.seed + state.ticks)

    alpha = state.alpha + (config.alpha_target - state.alpha) * config.alpha_decay

    vx = state.vx + (state.target_x - state.x) * config.x_strength * alpha
    vy = state.vy + (state.target_y - state.y) * config.y_strength * alpha

    for _ in range(config.collide_iterations):
        vx, vy = _collide(state.x, state.y, vx, vy, state.radius, config.collide_strength, rng)

    keep = 1 - config.velocity_decay
    vx = vx * keep
    vy = vy * keep
    return replace(
        state,
        x=state.x + vx,
        y=state.y + vy,
        vx=vx,
        vy=vy,
        alpha=alpha,
        ticks=state.ticks + 1,
    )


# ============================================================
# LIFECYCLE
# ============================================================

class SimStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class CancellationToken:
    """Set once by the owner when the chart goes away; checked every tick."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


TickCallback = Callable[[Tuple[PlacedNode, ...]], None]


class ForceSimulation:
    """
    Owns one set of nodes for one layout run.

    Idle    -> Running : start() / restart()
    Running -> Stopped : alpha < alpha_min, tick budget spent, stop(), or cancel
    """

    def __init__(
        self,
        nodes: Sequence[SimNode],
        config: Optional[ForceConfig] = None,
        on_tick: Optional[TickCallback] = None,
        token: Optional[CancellationToken] = None,
    ):
        self.config = config or ForceConfig()
        self._nodes: List[SimNode] = list(nodes)
        keys = [nd.key for nd in self._nodes]
        if len(set(keys)) != len(keys):
            raise ValueError("simulation node keys must be unique")
        self._on_tick = on_tick
        self.token = token or CancellationToken()
        self._rng = np.random.default_rng(self.config.seed)
        self.status = SimStatus.IDLE
        # positions exist before the first tick so an idle chart can be drawn
        self._state = state_from_nodes(self._nodes, self.config)
        self._ticks_this_run = 0

    @property
    def alpha(self) -> float:
        return self._state.alpha

    @property
    def ticks(self) -> int:
        return self._state.ticks

    @property
    def state(self) -> SimulationState:
        return self._state

    def positions(self) -> Tuple[PlacedNode, ...]:
        s = self._state
        return tuple(
            PlacedNode(nd.key, float(s.x[i]), float(s.y[i]), float(s.radius[i]), nd.category)
            for i, nd in enumerate(self._nodes)
        )

    def position_map(self) -> Dict[str, PlacedNode]:
        return {p.key: p for p in self.positions()}

    def start(self) -> "ForceSimulation":
        return self.restart(alpha=None)

    def restart(self, alpha: Optional[float] = 1.0) -> "ForceSimulation":
        if self.token.cancelled:
            logger.debug("restart ignored: simulation was cancelled")
            return self
        if alpha is not None:
            self._state = replace(self._state, alpha=alpha)
        self.status = SimStatus.RUNNING
        self._ticks_this_run = 0
        logger.debug("simulation started: %d nodes, alpha=%.3f", len(self._nodes), self._state.alpha)
        return self

    def stop(self) -> None:
        if self.status is SimStatus.RUNNING:
            logger.debug("simulation stopped after %d ticks (alpha=%.4f)", self._state.ticks, self._state.alpha)
        self.status = SimStatus.STOPPED
        self._write_back()

    def cancel(self) -> None:
        """Tear-down: no more ticks, no more callbacks."""
        self.token.cancel()
        self.stop()

    def step(self) -> bool:
        """
        Run one tick if running. Returns True while the simulation should
        keep being scheduled.
        """
        if self.status is not SimStatus.RUNNING:
            return False
        if self.token.cancelled:
            self.stop()
            return False

        self._state = tick(self._state, self.config, self._rng)
        self._ticks_this_run += 1

        if self._on_tick is not None:
            self._on_tick(self.positions())

        if self._state.alpha < self.config.alpha_min or self._ticks_this_run >= self.config.max_ticks:
            self.stop()
            return False
        return True

    def run(self) -> Tuple[PlacedNode, ...]:
        """Start if idle and tick synchronously until stopped."""
        if self.status is SimStatus.IDLE:
            self.start()
        while self.step():
            pass
        return self.positions()

    def _write_back(self) -> None:
        s = self._state
        for i, nd in enumerate(self._nodes):
            nd.x, nd.y = float(s.x[i]), float(s.y[i])
            nd.vx, nd.vy = float(s.vx[i]), float(s.vy[i])


# ============================================================
# FRAMES
# ============================================================

@dataclass
class FrameRecorder:
    """
    Tick callback that keeps every ``stride``-th frame of positions, so the
    browser can replay the layout without running it.
    """
    stride: int = 1
    frames: List[Dict[str, Tuple[float, float]]] = field(default_factory=list)
    _seen: int = field(default=0, init=False, repr=False)

    def __call__(self, positions: Tuple[PlacedNode, ...]) -> None:
        self._seen += 1
        if self._seen % max(1, self.stride) == 0:
            self.frames.append({p.key: (round(p.x, 2), round(p.y, 2)) for p in positions})

    def finish(self, positions: Tuple[PlacedNode, ...]) -> None:
        """Make sure the resting position is the last frame."""
        last = {p.key: (round(p.x, 2), round(p.y, 2)) for p in positions}
        if not self.frames or self.frames[-1] != last:
            self.frames.append(last)


def overlapping_pairs(positions: Sequence[PlacedNode], tolerance: float = 1e-6) -> List[Tuple[str, str]]:
    """Pairs whose centres are closer than the sum of their radii."""
    out = []
    for i, a in enumerate(positions):
        for b in positions[i + 1:]:
            if math.hypot(a.x - b.x, a.y - b.y) < a.radius + b.radius - tolerance:
                out.append((a.key, b.key))
    return out

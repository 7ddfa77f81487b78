"""Force-directed layout of the whole graph.

One sub-step applies, in order: pairwise inverse-square repulsion, Hookean
springs along declared edges, gravity toward the origin, velocity damping,
then a single position update. Forces within a sub-step are all computed
from the positions left by the previous sub-step.

The simulation runs a fixed number of ticks and then settles; it does not
detect convergence.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Mapping, NamedTuple

from ..errors import ConfigError
from ..models import KnowledgeGraph, LinkType
from ..vault.graph import degree_counts, resolved_edges

logger = logging.getLogger(__name__)

# Tick tiers: frames run several sub-steps early on for faster settling
EARLY_TICKS = 60
MIDDLE_TICKS = 200
EARLY_STEPS = 5
MIDDLE_STEPS = 2

MIN_SPREAD = 300.0
SPREAD_PER_NODE = 14.0
JITTER = 30.0
DISTANCE_FLOOR = 0.01


@dataclass
class ForceConfig:
    """Rendering and physics parameters."""

    edge_width: float = 1.2
    node_base_radius: float = 7.0
    node_max_extra_radius: float = 8.0  # cap on radius added by degree
    repulsion: float = 5500.0
    spring_k: float = 0.03
    rest_length: float = 120.0
    gravity: float = 0.03
    damping: float = 0.85
    max_ticks: int = 500
    seed: int | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "ForceConfig":
        """Build a config from a partial mapping; omitted options keep their defaults."""
        if not mapping:
            return cls()
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(mapping) - set(known))
        if unknown:
            raise ConfigError(f"Unknown force layout option(s): {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, raw in mapping.items():
            if raw is None:
                continue
            try:
                if key in ("max_ticks", "seed"):
                    values[key] = int(raw)
                else:
                    values[key] = float(raw)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Force layout option {key!r} must be a number, got {raw!r}") from e

        config = cls(**values)
        if not 0 < config.damping < 1:
            raise ConfigError(f"damping must be between 0 and 1, got {config.damping}")
        if config.max_ticks < 0:
            raise ConfigError(f"max_ticks must be >= 0, got {config.max_ticks}")
        return config


class LayoutState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    SETTLED = "settled"


@dataclass
class ViewportState:
    """Pan/zoom transform; independent of the physics."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0


@dataclass
class ForceNode:
    id: str
    x: float
    y: float
    r: float
    vx: float = 0.0
    vy: float = 0.0
    is_root: bool = False


class ForceEdge(NamedTuple):
    source: str
    target: str
    type: LinkType


def steps_for_tick(tick: int) -> int:
    """Sub-steps per displayed frame at a given tick count."""
    if tick < EARLY_TICKS:
        return EARLY_STEPS
    if tick < MIDDLE_TICKS:
        return MIDDLE_STEPS
    return 1


@dataclass
class ForceLayout:
    """Simulation handle: mount once, step or run, stop at any time."""

    config: ForceConfig = field(default_factory=ForceConfig)
    state: LayoutState = LayoutState.UNINITIALIZED
    tick: int = 0
    nodes: dict[str, ForceNode] = field(default_factory=dict)
    edges: list[ForceEdge] = field(default_factory=list)
    viewport: ViewportState = field(default_factory=ViewportState)
    _stopped: bool = False

    def mount(
        self,
        graph: KnowledgeGraph,
        root_name: str | None = None,
        viewport: ViewportState | None = None,
    ) -> "ForceLayout":
        """Place every note on a circle and collect the drawable edges.

        Nodes start evenly spaced on a circle scaled to the node count, plus a
        small random jitter, so pure repulsion never starts from a degenerate
        configuration. Edges pointing outside the graph are dropped.
        """
        if self.state is not LayoutState.UNINITIALIZED:
            raise RuntimeError("ForceLayout is already mounted")
        if viewport is not None:
            self.viewport = ViewportState(viewport.x, viewport.y, viewport.zoom)

        cfg = self.config
        rng = random.Random(cfg.seed)
        degree = degree_counts(graph)
        names = list(graph)
        spread = max(MIN_SPREAD, len(names) * SPREAD_PER_NODE)

        for i, name in enumerate(names):
            angle = (i / len(names)) * math.pi * 2
            self.nodes[name] = ForceNode(
                id=name,
                x=math.cos(angle) * spread + (rng.random() - 0.5) * JITTER,
                y=math.sin(angle) * spread + (rng.random() - 0.5) * JITTER,
                r=cfg.node_base_radius + min(float(degree[name]), cfg.node_max_extra_radius),
                is_root=name == root_name,
            )

        self.edges = [ForceEdge(*edge) for edge in resolved_edges(graph)]
        self.state = LayoutState.SETTLED if self._stopped else LayoutState.RUNNING
        logger.debug("Mounted force layout: %d nodes, %d edges", len(self.nodes), len(self.edges))
        return self

    @property
    def running(self) -> bool:
        return self.state is LayoutState.RUNNING

    def apply_forces(self) -> None:
        """Run one physics sub-step."""
        cfg = self.config
        nodes = list(self.nodes.values())

        # O(n^2) pairwise repulsion
        for i in range(len(nodes) - 1):
            a = nodes[i]
            for j in range(i + 1, len(nodes)):
                b = nodes[j]
                dx = b.x - a.x
                dy = b.y - a.y
                d2 = dx * dx + dy * dy + DISTANCE_FLOOR
                d = math.sqrt(d2)
                f = cfg.repulsion / d2
                fx = dx / d * f
                fy = dy / d * f
                a.vx -= fx
                a.vy -= fy
                b.vx += fx
                b.vy += fy

        # Springs toward rest length: attractive when stretched, repulsive when compressed
        for edge in self.edges:
            s = self.nodes[edge.source]
            t = self.nodes[edge.target]
            dx = t.x - s.x
            dy = t.y - s.y
            d = math.sqrt(dx * dx + dy * dy) or 1.0
            f = cfg.spring_k * (d - cfg.rest_length)
            fx = dx / d * f
            fy = dy / d * f
            s.vx += fx
            s.vy += fy
            t.vx -= fx
            t.vy -= fy

        # Gravity, damping, integration
        for n in nodes:
            n.vx = (n.vx - n.x * cfg.gravity) * cfg.damping
            n.vy = (n.vy - n.y * cfg.gravity) * cfg.damping
            n.x += n.vx
            n.y += n.vy

    def step(self) -> bool:
        """Advance one displayed frame; returns True while the layout is still running."""
        if not self.running:
            return False
        steps = min(steps_for_tick(self.tick), self.config.max_ticks - self.tick)
        for _ in range(steps):
            self.apply_forces()
            self.tick += 1
        if self.tick >= self.config.max_ticks:
            self.state = LayoutState.SETTLED
            logger.debug("Force layout settled after %d ticks", self.tick)
        return self.running

    def run(
        self,
        on_frame: Callable[["ForceLayout"], None] | None = None,
        max_frames: int | None = None,
    ) -> "ForceLayout":
        """Step frames until settled, stopped, or max_frames is reached.

        on_frame is called between frames, the only point where the loop yields.
        """
        frames = 0
        while self.running and (max_frames is None or frames < max_frames):
            self.step()
            frames += 1
            if on_frame is not None:
                on_frame(self)
        return self

    def stop(self) -> None:
        """Halt further ticks. Safe before mount, after settling, and when repeated."""
        self._stopped = True
        if self.state is LayoutState.RUNNING:
            self.state = LayoutState.SETTLED

    def viewport_state(self) -> ViewportState:
        return ViewportState(self.viewport.x, self.viewport.y, self.viewport.zoom)

    def positions(self) -> dict[str, tuple[float, float]]:
        return {name: (n.x, n.y) for name, n in self.nodes.items()}

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "ticks": self.tick,
            "nodes": [
                {"id": n.id, "x": round(n.x, 2), "y": round(n.y, 2), "r": n.r, "root": n.is_root}
                for n in self.nodes.values()
            ],
            "edges": [e._asdict() for e in self.edges],
            "viewport": {"x": self.viewport.x, "y": self.viewport.y, "zoom": self.viewport.zoom},
        }


def mount_force_layout(
    graph: KnowledgeGraph,
    root_name: str | None = None,
    config: ForceConfig | Mapping[str, Any] | None = None,
    viewport: ViewportState | None = None,
) -> ForceLayout:
    """Create a force layout over the whole graph, ready to step or run."""
    if not isinstance(config, ForceConfig):
        config = ForceConfig.from_mapping(config)
    return ForceLayout(config=config).mount(graph, root_name=root_name, viewport=viewport)

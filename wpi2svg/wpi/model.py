"""Decoded stroke model: canvas → layers → strokes → points.

Points are single records carrying optional pressure and tilt.  The
stream emits position, pressure and tilt samples as independent blocks
with no lock-step guarantee, so samples are paired by arrival order at
append time: the k-th pressure sample of a stroke belongs to its k-th
point, and likewise for tilt.  A sample that arrives before its point
waits in a pending queue and is attached when the point is appended.

All coordinates are output canvas units (already transformed).
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(slots=True)
class Point:
    """One sampled pen position.

    Parameters
    ----------
    x, y : int
        Output canvas coordinates.
    pressure : int | None
        Pressure sample, ``None`` when the stream never supplied one.
    tilt : tuple[int, int] | None
        ``(tilt_x, tilt_y)`` sample, ``None`` when absent.
    """

    x: int
    y: int
    pressure: int | None = None
    tilt: tuple[int, int] | None = None


class _SampleTrack:
    """Pairs one kind of sample (pressure or tilt) with points by order.

    Invariant: points ``[0, assigned)`` have this sample set, and
    ``pending`` is non-empty only when ``assigned == len(points)``.
    """

    __slots__ = ("attr", "assigned", "pending")

    def __init__(self, attr: str) -> None:
        self.attr = attr
        self.assigned = 0
        self.pending: deque = deque()

    def add(self, points: list[Point], value) -> None:
        if self.assigned < len(points):
            setattr(points[self.assigned], self.attr, value)
            self.assigned += 1
        else:
            self.pending.append(value)

    def on_point(self, point: Point) -> None:
        if self.pending:
            setattr(point, self.attr, self.pending.popleft())
            self.assigned += 1


class Stroke:
    """Continuous pen movement: an ordered list of points."""

    def __init__(self) -> None:
        self.points: list[Point] = []
        self._pressure = _SampleTrack("pressure")
        self._tilt = _SampleTrack("tilt")

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __repr__(self) -> str:
        return f"Stroke(points={len(self.points)})"

    @property
    def pending_samples(self) -> tuple[int, int]:
        """``(pressure, tilt)`` samples still waiting for a point."""
        return len(self._pressure.pending), len(self._tilt.pending)

    def add_point(self, x: int, y: int) -> Point:
        point = Point(x=x, y=y)
        self._pressure.on_point(point)
        self._tilt.on_point(point)
        self.points.append(point)
        return point

    def add_pressure(self, pressure: int) -> None:
        self._pressure.add(self.points, pressure)

    def add_tilt(self, tilt_x: int, tilt_y: int) -> None:
        self._tilt.add(self.points, (tilt_x, tilt_y))

    def pressures(self, default: int = 0) -> list[int]:
        """Per-point pressure with *default* substituted for gaps."""
        return [default if p.pressure is None else p.pressure for p in self.points]


@dataclass
class Layer:
    """Named group of strokes (``l1``, ``l2``, ...)."""

    name: str
    strokes: list[Stroke] = field(default_factory=list)

    def add_stroke(self) -> Stroke:
        stroke = Stroke()
        self.strokes.append(stroke)
        return stroke


@dataclass
class Canvas:
    """Root container.  Always holds at least one layer.

    The first layer is created on construction because the format does
    not guarantee a leading layer marker.
    """

    layers: list[Layer] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.layers:
            self.add_layer()

    def add_layer(self) -> Layer:
        layer = Layer(name=f"l{len(self.layers) + 1}")
        self.layers.append(layer)
        return layer

    @property
    def current_layer(self) -> Layer:
        return self.layers[-1]

    @property
    def stroke_count(self) -> int:
        return sum(len(layer.strokes) for layer in self.layers)

    @property
    def point_count(self) -> int:
        return sum(len(s) for layer in self.layers for s in layer.strokes)

    def iter_strokes(self) -> Iterator[tuple[Layer, int, Stroke]]:
        """Yield ``(layer, index_in_layer, stroke)`` in document order."""
        for layer in self.layers:
            for i, stroke in enumerate(layer.strokes):
                yield layer, i, stroke

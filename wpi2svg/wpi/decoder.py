"""WPI decoder -- block stream to ``Canvas``.

``CanvasBuilder`` applies blocks one at a time and owns all decoding
state (current layer, current stroke, counters); nothing is global.
``decode_stream`` drives it from a byte stream and ``decode_file``
adds the file plumbing (large read buffer, header skip).

Failure policy:
    A clean end of stream at a block boundary ends decoding.  Any
    other read failure raises ``DecodeError`` carrying the partially
    built canvas in ``exc.canvas``; whether to render it is the
    caller's decision.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable

from wpi2svg.wpi.blocks import (
    HEADER_LENGTH,
    Block,
    ControlMarker,
    IgnoredBlock,
    LayerMarker,
    PenPosition,
    PenPressure,
    PenTilt,
    ReservedBlock,
    StrokeBegin,
    StrokeEnd,
    transform_position,
)
from wpi2svg.wpi.model import Canvas, Stroke
from wpi2svg.wpi.reader import DecodeError, iter_blocks

logger = logging.getLogger(__name__)

READ_BUFFER_BYTES = 10 * 1024 * 1024


@dataclass
class DecodeStats:
    """Counters gathered while decoding one stream.

    Attributes
    ----------
    blocks : Counter
        Block count keyed by variant name (``"PenPosition"``, ...).
    reserved_bytes : int
        Payload bytes consumed by reserved blocks.
    orphan_samples : int
        Position, pressure or tilt samples that arrived while no stroke
        was open and were dropped.
    """

    blocks: Counter = field(default_factory=Counter)
    reserved_bytes: int = 0
    orphan_samples: int = 0

    @property
    def total_blocks(self) -> int:
        return sum(self.blocks.values())


class CanvasBuilder:
    """Incrementally build a ``Canvas`` from decoded blocks.

    Notes
    -----
    After a layer marker there is no current stroke until the next
    stroke-begin marker.
    """

    def __init__(self) -> None:
        self.canvas = Canvas()
        self.stats = DecodeStats()
        self._layer = self.canvas.current_layer
        self._stroke: Stroke | None = None

    @property
    def current_stroke(self) -> Stroke | None:
        return self._stroke

    def apply(self, block: Block) -> None:
        """Apply one block to the canvas under construction."""
        self.stats.blocks[type(block).__name__] += 1

        if isinstance(block, LayerMarker):
            self._layer = self.canvas.add_layer()
            self._stroke = None
            logger.debug("Layer %s started", self._layer.name)
        elif isinstance(block, StrokeBegin):
            self._stroke = self._layer.add_stroke()
        elif isinstance(block, StrokeEnd):
            # No reliable end boundary in the format
            pass
        elif isinstance(block, PenPosition):
            stroke = self._require_stroke(block)
            if stroke is not None:
                stroke.add_point(*transform_position(block.raw_x, block.raw_y))
        elif isinstance(block, PenPressure):
            stroke = self._require_stroke(block)
            if stroke is not None:
                stroke.add_pressure(block.pressure)
        elif isinstance(block, PenTilt):
            stroke = self._require_stroke(block)
            if stroke is not None:
                stroke.add_tilt(block.tilt_x, block.tilt_y)
        elif isinstance(block, ReservedBlock):
            self.stats.reserved_bytes += len(block.payload)
        elif isinstance(block, (IgnoredBlock, ControlMarker)):
            logger.debug("Ignoring %s", block)
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def apply_all(self, blocks: Iterable[Block]) -> Canvas:
        for block in blocks:
            self.apply(block)
        return self.canvas

    def _require_stroke(self, block: Block) -> Stroke | None:
        if self._stroke is None:
            self.stats.orphan_samples += 1
            logger.debug("Dropping %s outside any stroke", type(block).__name__)
        return self._stroke


def decode_stream(stream: BinaryIO) -> Canvas:
    """Decode a block stream into a ``Canvas``.

    Parameters
    ----------
    stream : BinaryIO
        Readable binary stream positioned past the document header.

    Returns
    -------
    Canvas
        Fully populated canvas.

    Raises
    ------
    DecodeError
        If a read fails other than at a clean block boundary.  The
        partial canvas and stats are attached as ``exc.canvas`` and
        ``exc.stats``.
    """
    builder = CanvasBuilder()
    try:
        builder.apply_all(iter_blocks(stream))
    except DecodeError as exc:
        exc.canvas = builder.canvas
        exc.stats = builder.stats
        logger.warning(
            "Decode stopped after %d blocks at offset %s: %s",
            builder.stats.total_blocks, exc.offset, exc,
        )
        raise

    _log_summary(builder)
    return builder.canvas


def decode_file(
    path: str | Path,
    header_length: int = HEADER_LENGTH,
    buffer_size: int = READ_BUFFER_BYTES,
) -> Canvas:
    """Open a WPI file, skip its header and decode the block stream.

    Parameters
    ----------
    path : str | Path
        WPI capture file.
    header_length : int
        Bytes of opaque document header to seek past.
    buffer_size : int
        Read buffer size in bytes.

    Raises
    ------
    OSError
        If the file cannot be opened or seeked.
    DecodeError
        As for ``decode_stream``.
    """
    path = Path(path)
    logger.info("Decoding %s", path)
    with open(path, "rb", buffering=buffer_size) as f:
        f.seek(header_length)
        return decode_stream(f)


def _log_summary(builder: CanvasBuilder) -> None:
    canvas, stats = builder.canvas, builder.stats
    logger.info(
        "Decoded %d layers, %d strokes, %d points from %d blocks",
        len(canvas.layers), canvas.stroke_count, canvas.point_count,
        stats.total_blocks,
    )
    if stats.orphan_samples:
        logger.warning(
            "Dropped %d samples that arrived outside a stroke",
            stats.orphan_samples,
        )
    if stats.reserved_bytes:
        logger.debug("Skipped %d reserved payload bytes", stats.reserved_bytes)

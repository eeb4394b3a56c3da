"""WPI block vocabulary -- one immutable variant per block kind.

A WPI stream is a flat sequence of tagged blocks.  Each block starts
with a two-byte header: a **tag** byte selecting the block kind and an
**auxiliary** byte whose meaning depends on the tag (only the reserved
kinds use it, as a length).  The stream carries no block count, no
total length and no reliable stroke or layer terminator, so the reader
works one block at a time and never looks further ahead.

Block kinds
-----------
Stroke control (tag 241)
    One extra control byte: layer marker (128), stroke begin (1),
    stroke end (0).  Any other control byte is kept as
    ``ControlMarker`` and ignored downstream.
Pen position (tag 97)
    Four payload bytes: big-endian signed 16-bit raw X then raw Y.
Pen pressure (tag 100)
    Four payload bytes; pressure is the big-endian signed 16-bit value
    in bytes 2-3.  Bytes 0-1 are reserved.
Pen tilt (tag 101)
    Four payload bytes; bytes 0 and 1 are unsigned tilt X / tilt Y.
Reserved (tags 197, 194, 199)
    Opaque payload of ``aux - 2`` bytes, consumed so that the stream
    stays aligned.
Anything else
    No payload.  Kept as ``IgnoredBlock``.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Format constants
# ---------------------------------------------------------------------------

HEADER_LENGTH = 2059
"""Size of the opaque document header preceding the block stream."""

BLOCK_HEADER_LENGTH = 2
PAYLOAD_LENGTH = 4
"""Fixed payload size of position, pressure and tilt blocks."""

TAG_STROKE = 241
TAG_PEN_XY = 97
TAG_PEN_PRESSURE = 100
TAG_PEN_TILT = 101
RESERVED_TAGS = frozenset({197, 194, 199})

ID_LAYER = 128
ID_STROKE_BEGIN = 1
ID_STROKE_END = 0

OFFSET_X = 1414
"""Horizontal shift applied after scaling raw sensor X."""

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Block(ABC):
    """Base class for all decoded WPI blocks."""

    pass


# ---------------------------------------------------------------------------
# Stroke control
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LayerMarker(Block):
    """Start a new layer; subsequent strokes belong to it."""

    pass


@dataclass(frozen=True, slots=True)
class StrokeBegin(Block):
    """Start a new stroke under the current layer."""

    pass


@dataclass(frozen=True, slots=True)
class StrokeEnd(Block):
    """End-of-stroke marker.

    The format does not place it reliably, so it carries no structural
    meaning.
    """

    pass


@dataclass(frozen=True, slots=True)
class ControlMarker(Block):
    """Stroke-control block with an unrecognised control byte."""

    control_id: int


# ---------------------------------------------------------------------------
# Pen samples
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PenPosition(Block):
    """Raw pen position in sensor units.

    Parameters
    ----------
    raw_x, raw_y : int
        Signed 16-bit sensor coordinates, before ``transform_position``.
    """

    raw_x: int
    raw_y: int


@dataclass(frozen=True, slots=True)
class PenPressure(Block):
    """Pen pressure sample (signed 16-bit, nominal range 0-1024)."""

    pressure: int


@dataclass(frozen=True, slots=True)
class PenTilt(Block):
    """Pen tilt sample.

    Parameters
    ----------
    tilt_x, tilt_y : int
        Unsigned byte magnitudes (0-255).
    """

    tilt_x: int
    tilt_y: int

    def __post_init__(self) -> None:
        for name, val in (("tilt_x", self.tilt_x), ("tilt_y", self.tilt_y)):
            if not 0 <= val <= 255:
                raise ValueError(f"PenTilt {name} must be in [0, 255], got {val}")


# ---------------------------------------------------------------------------
# Skipped blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReservedBlock(Block):
    """Reserved block whose payload was consumed without interpretation.

    Parameters
    ----------
    tag : int
        One of ``RESERVED_TAGS``.
    aux : int
        Auxiliary header byte.  The payload is ``aux - 2`` bytes long.
    payload : bytes
        The skipped bytes, kept for inspection.
    """

    tag: int
    aux: int
    payload: bytes = b""


@dataclass(frozen=True, slots=True)
class IgnoredBlock(Block):
    """Block with an unknown tag; nothing beyond its header was read."""

    tag: int
    aux: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def reserved_payload_length(aux: int) -> int:
    """Payload size of a reserved block given its auxiliary byte.

    The length field is a single byte on the wire, so the subtraction
    wraps modulo 256 (``aux`` of 0 or 1 announces 254 or 255 bytes).
    """
    return (aux - 2) & 0xFF


def _trunc_div(num: int, den: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(num) // abs(den)
    return q if (num >= 0) == (den > 0) else -q


def transform_position(raw_x: int, raw_y: int) -> tuple[int, int]:
    """Map raw sensor units to output canvas units.

    ``x' = (x + 5) / 8 + OFFSET_X`` and ``y' = (2y + 5) / 8`` with
    integer division rounding toward zero.

    Examples
    --------
    >>> transform_position(10, 20)
    (1415, 5)
    """
    x = _trunc_div(raw_x + 5, 8) + OFFSET_X
    y = _trunc_div(2 * raw_y + 5, 8)
    return x, y

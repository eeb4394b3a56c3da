"""Byte stream → WPI blocks.

The reader consumes exactly one block per call and never looks past
it.  A clean end of stream is only recognised at a block boundary;
running out of bytes anywhere else is a ``DecodeError``.

Byte order:
    Position and pressure values are big-endian signed 16-bit, even
    though the file declares no global endianness.
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Iterator

from wpi2svg.wpi.blocks import (
    BLOCK_HEADER_LENGTH,
    ID_LAYER,
    ID_STROKE_BEGIN,
    ID_STROKE_END,
    PAYLOAD_LENGTH,
    RESERVED_TAGS,
    TAG_PEN_PRESSURE,
    TAG_PEN_TILT,
    TAG_PEN_XY,
    TAG_STROKE,
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
    reserved_payload_length,
)

logger = logging.getLogger(__name__)

_XY = struct.Struct(">hh")
_PRESSURE = struct.Struct(">2xh")


class DecodeError(Exception):
    """Raised when the block stream cannot be read.

    Attributes
    ----------
    canvas : Canvas | None
        Partially built canvas, attached by the decoder so callers can
        still render what was recovered.
    stats : DecodeStats | None
        Block counters gathered up to the failure.
    offset : int | None
        Stream offset of the failing block header, when known.
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset
        self.canvas = None
        self.stats = None


def _read_exact(stream: BinaryIO, n: int, what: str) -> bytes:
    """Read exactly *n* bytes or raise ``DecodeError``."""
    if n == 0:
        return b""
    try:
        data = stream.read(n)
    except OSError as exc:
        raise DecodeError(f"Failed to read {what}: {exc}") from exc
    if data is None or len(data) != n:
        got = 0 if data is None else len(data)
        raise DecodeError(f"Truncated {what}: expected {n} bytes, got {got}")
    return data


def read_block(stream: BinaryIO) -> Block | None:
    """Read and decode the next block.

    Parameters
    ----------
    stream : BinaryIO
        Readable binary stream positioned at a block header.

    Returns
    -------
    Block | None
        The decoded block, or ``None`` at a clean end of stream.

    Raises
    ------
    DecodeError
        If the stream ends inside a block or a read fails.
    """
    try:
        head = stream.read(BLOCK_HEADER_LENGTH)
    except OSError as exc:
        raise DecodeError(f"Failed to read block header: {exc}") from exc
    if not head:
        return None
    if len(head) != BLOCK_HEADER_LENGTH:
        raise DecodeError(
            f"Truncated block header: expected {BLOCK_HEADER_LENGTH} bytes, "
            f"got {len(head)}"
        )

    tag, aux = head[0], head[1]

    if tag == TAG_STROKE:
        control_id = _read_exact(stream, 1, "stroke control byte")[0]
        if control_id == ID_LAYER:
            return LayerMarker()
        if control_id == ID_STROKE_BEGIN:
            return StrokeBegin()
        if control_id == ID_STROKE_END:
            return StrokeEnd()
        return ControlMarker(control_id=control_id)

    if tag == TAG_PEN_XY:
        raw_x, raw_y = _XY.unpack(_read_exact(stream, PAYLOAD_LENGTH, "position payload"))
        return PenPosition(raw_x=raw_x, raw_y=raw_y)

    if tag == TAG_PEN_PRESSURE:
        (pressure,) = _PRESSURE.unpack(
            _read_exact(stream, PAYLOAD_LENGTH, "pressure payload")
        )
        return PenPressure(pressure=pressure)

    if tag == TAG_PEN_TILT:
        data = _read_exact(stream, PAYLOAD_LENGTH, "tilt payload")
        return PenTilt(tilt_x=data[0], tilt_y=data[1])

    if tag in RESERVED_TAGS:
        n = reserved_payload_length(aux)
        payload = _read_exact(stream, n, f"reserved block 0x{tag:02X} payload")
        return ReservedBlock(tag=tag, aux=aux, payload=payload)

    return IgnoredBlock(tag=tag, aux=aux)


def iter_blocks(stream: BinaryIO) -> Iterator[Block]:
    """Yield blocks until a clean end of stream.

    ``DecodeError`` propagates from the failing ``read_block`` call
    with ``offset`` set when the stream supports ``tell()``.
    """
    while True:
        offset = _tell(stream)
        try:
            block = read_block(stream)
        except DecodeError as exc:
            if exc.offset is None:
                exc.offset = offset
            raise
        if block is None:
            return
        yield block


def _tell(stream: BinaryIO) -> int | None:
    try:
        return stream.tell()
    except (AttributeError, OSError):
        return None

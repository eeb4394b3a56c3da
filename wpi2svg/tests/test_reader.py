"""Tests for the byte stream → block reader.

Covers each tag's payload layout, reserved-block skipping, tolerance
of unknown tags, clean end of stream, and truncation / I/O failures.
"""

from __future__ import annotations

import io
import struct

import pytest

from wpi2svg.wpi.blocks import (
    ControlMarker,
    IgnoredBlock,
    LayerMarker,
    PenPosition,
    PenPressure,
    PenTilt,
    ReservedBlock,
    StrokeBegin,
    StrokeEnd,
)
from wpi2svg.wpi.reader import DecodeError, iter_blocks, read_block


def _stream(*chunks: bytes) -> io.BytesIO:
    return io.BytesIO(b"".join(chunks))


def _position(x: int, y: int) -> bytes:
    return bytes([97, 0]) + struct.pack(">hh", x, y)


def _pressure(p: int, reserved: int = 0) -> bytes:
    return bytes([100, 0]) + struct.pack(">hh", reserved, p)


class _FailingStream(io.RawIOBase):
    """Serves *data* then raises OSError on the next read."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def readable(self) -> bool:
        return True

    def read(self, n: int = -1) -> bytes:
        if not self._data:
            raise OSError("device unplugged")
        chunk, self._data = self._data[:n], self._data[n:]
        return chunk


# ---------------------------------------------------------------------------
# Stroke control
# ---------------------------------------------------------------------------


class TestStrokeControl:
    def test_layer_marker(self) -> None:
        assert read_block(_stream(bytes([241, 0, 128]))) == LayerMarker()

    def test_stroke_begin(self) -> None:
        assert read_block(_stream(bytes([241, 0, 1]))) == StrokeBegin()

    def test_stroke_end(self) -> None:
        assert read_block(_stream(bytes([241, 0, 0]))) == StrokeEnd()

    def test_unknown_control_id(self) -> None:
        assert read_block(_stream(bytes([241, 0, 42]))) == ControlMarker(control_id=42)

    def test_missing_control_byte(self) -> None:
        with pytest.raises(DecodeError, match="stroke control byte"):
            read_block(_stream(bytes([241, 0])))


# ---------------------------------------------------------------------------
# Pen samples
# ---------------------------------------------------------------------------


class TestPenSamples:
    def test_position_big_endian(self) -> None:
        block = read_block(_stream(bytes([97, 0, 0x00, 0x0A, 0x00, 0x14])))
        assert block == PenPosition(raw_x=10, raw_y=20)

    def test_position_signed(self) -> None:
        block = read_block(_stream(bytes([97, 0, 0xFF, 0xFF, 0x80, 0x00])))
        assert block == PenPosition(raw_x=-1, raw_y=-32768)

    def test_pressure_uses_bytes_two_and_three(self) -> None:
        block = read_block(_stream(_pressure(700, reserved=0x1234)))
        assert block == PenPressure(pressure=700)

    def test_pressure_signed(self) -> None:
        block = read_block(_stream(bytes([100, 0, 0, 0, 0xFF, 0xF6])))
        assert block == PenPressure(pressure=-10)

    def test_tilt_unsigned_bytes(self) -> None:
        block = read_block(_stream(bytes([101, 0, 200, 17, 0xAB, 0xCD])))
        assert block == PenTilt(tilt_x=200, tilt_y=17)

    def test_truncated_payload(self) -> None:
        with pytest.raises(DecodeError, match="position payload"):
            read_block(_stream(bytes([97, 0, 0x00, 0x0A])))


# ---------------------------------------------------------------------------
# Reserved and unknown tags
# ---------------------------------------------------------------------------


class TestSkippedBlocks:
    @pytest.mark.parametrize("tag", [197, 194, 199])
    def test_reserved_skips_aux_minus_two(self, tag: int) -> None:
        payload = bytes(range(8))
        stream = _stream(bytes([tag, 10]), payload, _position(10, 20))
        block = read_block(stream)
        assert block == ReservedBlock(tag=tag, aux=10, payload=payload)
        assert read_block(stream) == PenPosition(raw_x=10, raw_y=20)

    def test_reserved_with_empty_payload(self) -> None:
        stream = _stream(bytes([194, 2]), bytes([241, 0, 1]))
        assert read_block(stream) == ReservedBlock(tag=194, aux=2)
        assert read_block(stream) == StrokeBegin()

    def test_reserved_truncated(self) -> None:
        with pytest.raises(DecodeError, match="reserved block 0xC5"):
            read_block(_stream(bytes([197, 10, 1, 2, 3])))

    def test_unknown_tag_consumes_header_only(self) -> None:
        stream = _stream(bytes([0x10, 0x55]), bytes([241, 0, 1]))
        assert read_block(stream) == IgnoredBlock(tag=0x10, aux=0x55)
        assert read_block(stream) == StrokeBegin()


# ---------------------------------------------------------------------------
# End of stream and failures
# ---------------------------------------------------------------------------


class TestEndOfStream:
    def test_empty_stream(self) -> None:
        assert read_block(_stream()) is None

    def test_single_header_byte(self) -> None:
        with pytest.raises(DecodeError, match="Truncated block header"):
            read_block(_stream(bytes([97])))

    def test_iter_blocks_in_order(self) -> None:
        stream = _stream(
            bytes([241, 0, 1]),
            _position(1, 2),
            _pressure(300),
            bytes([241, 0, 0]),
        )
        assert list(iter_blocks(stream)) == [
            StrokeBegin(),
            PenPosition(raw_x=1, raw_y=2),
            PenPressure(pressure=300),
            StrokeEnd(),
        ]

    def test_iter_blocks_reports_offset(self) -> None:
        stream = _stream(bytes([241, 0, 1]), bytes([97, 0, 1]))
        blocks = iter_blocks(stream)
        assert next(blocks) == StrokeBegin()
        with pytest.raises(DecodeError) as excinfo:
            next(blocks)
        assert excinfo.value.offset == 3

    def test_os_error_becomes_decode_error(self) -> None:
        stream = _FailingStream(bytes([241, 0, 1]))
        blocks = iter_blocks(stream)
        assert next(blocks) == StrokeBegin()
        with pytest.raises(DecodeError, match="device unplugged") as excinfo:
            next(blocks)
        assert isinstance(excinfo.value.__cause__, OSError)

"""
WPI stream decoding.

Subpackage modules:
    blocks: tagged block variants and format constants
    reader: byte stream → blocks
    model: Canvas / Layer / Stroke / Point
    decoder: blocks → Canvas
"""

from wpi2svg.wpi.blocks import HEADER_LENGTH, transform_position
from wpi2svg.wpi.decoder import (
    CanvasBuilder,
    DecodeStats,
    decode_file,
    decode_stream,
)
from wpi2svg.wpi.model import Canvas, Layer, Point, Stroke
from wpi2svg.wpi.reader import DecodeError, iter_blocks, read_block

__all__ = [
    "HEADER_LENGTH",
    "Canvas",
    "CanvasBuilder",
    "DecodeError",
    "DecodeStats",
    "Layer",
    "Point",
    "Stroke",
    "decode_file",
    "decode_stream",
    "iter_blocks",
    "read_block",
    "transform_position",
]

#!/usr/bin/env python3
"""
Convert Script.

Decode a WPI pen-capture file and write the strokes as SVG next to it.

Usage:
    wpi2svg page1.wpi
    python -m wpi2svg.scripts.convert page1.wpi --log-level DEBUG
    python -m wpi2svg.scripts.convert page1.wpi --strict

Exit codes:
    0  conversion finished (also when the input could not be opened or
       the output could not be written; both are logged)
    1  no input path given, invalid configuration, or a decode error
       under --strict / ``decode.render_partial: false``
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from wpi2svg.configs.loader import ConfigError, ConverterConfig, load_config
from wpi2svg.svg.generator import SVGGenerator
from wpi2svg.utils import fs
from wpi2svg.utils.logging_config import pop_context, push_context, setup_logging
from wpi2svg.wpi.decoder import decode_file
from wpi2svg.wpi.model import Canvas
from wpi2svg.wpi.reader import DecodeError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpi2svg",
        description="Convert a WPI pen-capture file to SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="WPI file to convert; output goes next to it with an .svg extension",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Do not write output when decoding stops on an error",
    )
    return parser


def convert(input_path: str | Path, config: ConverterConfig, strict: bool = False) -> int:
    """Decode *input_path* and write its SVG rendering.

    Parameters
    ----------
    input_path : str | Path
        WPI capture file.
    config : ConverterConfig
        Validated converter configuration.
    strict : bool
        Discard a partially decoded document instead of rendering it.

    Returns
    -------
    int
        Process exit code.
    """
    input_path = Path(input_path)
    try:
        output_path = fs.derive_output_path(input_path, config.output.suffix)
    except ValueError as exc:
        logger.error("Cannot derive an output path from %s: %s", input_path, exc)
        return 0

    canvas: Canvas | None
    try:
        canvas = decode_file(
            input_path,
            header_length=config.decode.header_length,
            buffer_size=config.decode.read_buffer_bytes,
        )
    except DecodeError as exc:
        if strict or not config.decode.render_partial:
            logger.error("Decoding failed, no output written: %s", exc)
            return 1
        logger.warning("Decoding incomplete, rendering partial document: %s", exc)
        canvas = exc.canvas
    except OSError as exc:
        logger.error("Cannot read %s: %s", input_path, exc)
        return 0

    svg_text = SVGGenerator().generate(canvas)

    try:
        fs.atomic_write_text(output_path, svg_text)
    except OSError as exc:
        logger.error("Cannot write %s: %s", output_path, exc)
        return 0

    logger.info("Wrote %s", output_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.input:
        return 1

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    log_kwargs = config.logging_kwargs()
    if args.log_level:
        log_kwargs["log_level"] = args.log_level
    setup_logging(**log_kwargs, context={"app": "wpi2svg"})

    push_context(file=Path(args.input).name)
    try:
        return convert(args.input, config, strict=args.strict)
    finally:
        pop_context(keys=["file"])


if __name__ == "__main__":
    sys.exit(main())

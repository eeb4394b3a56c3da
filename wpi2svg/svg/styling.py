"""Pressure → segment width and grayscale.

Each segment takes the mean pressure of its two endpoints, normalised
by ``MAX_PRESSURE_LEVELS`` and clamped to [0, 1]::

    width = p * MAX_WIDTH
    gray  = int((1 - sqrt(p)) * MAX_GRAY)

Harder pressure gives wider, darker lines.  The square root pulls
moderate pressure toward dark.  Missing pressure counts as 0.

The mapping functions accept scalars or arrays; ``segment_styles``
applies them to a whole stroke at once.  These constants are fixed;
rendering is not configurable.
"""

from __future__ import annotations

import numpy as np

from wpi2svg.wpi.model import Stroke

MAX_PRESSURE_LEVELS = 1024.0
MAX_WIDTH = 6.0
MAX_GRAY = 254.0


def normalize_pressure(pressure):
    """Scale raw (mean) pressure into [0, 1]."""
    return np.clip(np.asarray(pressure, dtype=np.float64) / MAX_PRESSURE_LEVELS, 0.0, 1.0)


def pressure_to_width(p):
    """Line width for normalised pressure *p*."""
    return np.asarray(p, dtype=np.float64) * MAX_WIDTH


def pressure_to_gray(p):
    """Gray channel value (0 = black, 254 = near white) for *p*.

    *p* is non-negative, so the cast truncates the same way ``int`` does.
    """
    return ((1.0 - np.sqrt(p)) * MAX_GRAY).astype(np.int64)


def segment_styles(stroke: Stroke) -> tuple[np.ndarray, np.ndarray]:
    """Compute width and gray for every segment of *stroke*.

    Parameters
    ----------
    stroke : Stroke
        Decoded stroke with N points.

    Returns
    -------
    widths : np.ndarray
        float64, shape (max(N-1, 0),)
    grays : np.ndarray
        int64, shape (max(N-1, 0),), values in [0, 254]
    """
    pressures = np.asarray(stroke.pressures(default=0), dtype=np.float64)
    if pressures.size < 2:
        return np.zeros(0, dtype=np.float64), np.zeros(0, dtype=np.int64)

    p = normalize_pressure(0.5 * (pressures[:-1] + pressures[1:]))
    return pressure_to_width(p), pressure_to_gray(p)

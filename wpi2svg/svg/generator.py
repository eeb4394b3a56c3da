"""SVG generator -- decoded ``Canvas`` to SVG text.

Document structure::

    <svg width="2828" height="4000">
      <g id="l1">            one group per layer, creation order
        <g id="s0">          one group per stroke, index within layer
          <line .../>        one line per consecutive point pair
        </g>
      </g>
    </svg>

Every line carries its own style: round joins and caps, no fill, and
the pressure-derived stroke colour and width from ``styling``.  The
canvas size is fixed and declares no physical unit or DPI.
"""

from __future__ import annotations

import logging
from io import StringIO

import svgwrite

from wpi2svg.svg.styling import segment_styles
from wpi2svg.wpi.model import Canvas, Stroke

logger = logging.getLogger(__name__)

CANVAS_WIDTH = 2828
CANVAS_HEIGHT = 4000

_STYLE = "stroke-linejoin:round;stroke-linecap:round;fill:none;stroke:{color};stroke-width:{width:.2f}"


def segment_style(gray: int, width: float) -> str:
    """Inline CSS for one segment."""
    color = svgwrite.rgb(gray, gray, gray)
    return _STYLE.format(color=color, width=width)


class SVGGenerator:
    """Convert a decoded canvas to an SVG document.

    Parameters
    ----------
    width, height : int
        Document size in user units.
    """

    def __init__(self, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT) -> None:
        self._width = width
        self._height = height

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, canvas: Canvas) -> str:
        """Render *canvas* to SVG text.

        Parameters
        ----------
        canvas : Canvas
            Fully decoded canvas.

        Returns
        -------
        str
            Complete SVG document including the XML declaration.
        """
        buf = StringIO()
        self.build_drawing(canvas).write(buf)
        return buf.getvalue()

    def build_drawing(self, canvas: Canvas) -> svgwrite.Drawing:
        """Build the ``svgwrite.Drawing`` for *canvas* without serialising."""
        dwg = svgwrite.Drawing(size=(self._width, self._height), profile="full", debug=False)
        segments = 0

        for layer in canvas.layers:
            layer_group = dwg.g(id=layer.name)
            for i, stroke in enumerate(layer.strokes):
                stroke_group = dwg.g(id=f"s{i}")
                segments += self._add_segments(dwg, stroke_group, stroke)
                layer_group.add(stroke_group)
            dwg.add(layer_group)

        logger.info(
            "Rendered %d segments across %d layers", segments, len(canvas.layers)
        )
        return dwg

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _add_segments(self, dwg: svgwrite.Drawing, group, stroke: Stroke) -> int:
        widths, grays = segment_styles(stroke)
        points = stroke.points
        for i in range(len(widths)):
            a, b = points[i], points[i + 1]
            group.add(
                dwg.line(
                    start=(a.x, a.y),
                    end=(b.x, b.y),
                    style=segment_style(int(grays[i]), float(widths[i])),
                )
            )
        return len(widths)


def render_canvas(canvas: Canvas) -> str:
    """Render *canvas* with the default document size."""
    return SVGGenerator().generate(canvas)

"""
SVG rendering module.

Converts a decoded Canvas to an SVG document with pressure-derived
per-segment width and grayscale.
"""

from wpi2svg.svg.generator import SVGGenerator, render_canvas

__all__ = ["SVGGenerator", "render_canvas"]

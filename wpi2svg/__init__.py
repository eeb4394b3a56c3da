"""wpi2svg: WPI pen-capture files to SVG.

Decodes the tagged-block stream of a WPI file into a canvas → layer →
stroke → point model, then renders every stroke segment as an SVG line
whose width and gray level follow pen pressure.

Architecture layers (strict one-way dependency):
    scripts/ → {svg, configs}/ → wpi/ → utils/

Key invariants:
    - The canvas always has at least one layer
    - Coordinates are transformed to output units at decode time
    - Pressure and tilt are attached to points by arrival order
    - Rendering constants are fixed (no DPI, no physical units)
"""

__version__ = "1.0.0"

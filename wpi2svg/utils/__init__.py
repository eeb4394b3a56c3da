"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - YAML loading, atomic output writes, output naming (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (wpi, svg, configs, scripts).

Convenience imports:
    from wpi2svg.utils import fs
    from wpi2svg.utils.logging_config import setup_logging, push_context
"""

from . import fs
from . import logging_config

from .logging_config import pop_context, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'push_context',
    'pop_context',
]

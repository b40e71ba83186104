from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("regoreport")

logger = logging.getLogger("regoreport")

__all__ = ["__version__", "logger"]

"""\
Core
====

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module acts as an entry point for combining the configurations,
the error-class catalog and the classified exceptions used throughout
this framework.
"""

from __future__ import annotations

from .catalog import *
from .config import *
from .error import *
from .exceptions import *


__all__: tuple[str, ...] = (
    catalog.__all__ + config.__all__ + error.__all__ + exceptions.__all__
)

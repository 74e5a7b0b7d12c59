"""\
Utilities
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module acts as an entry point for combining various utilities used
throughout the framework.
"""

from __future__ import annotations

from .filesystem import *
from .logging import *


__all__: tuple[str, ...] = filesystem.__all__ + logging.__all__

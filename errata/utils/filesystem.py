"""\
Filesystem utility objects
==========================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides filesystem helpers used by the logging
configuration of this framework.
"""

from __future__ import annotations

import os

__all__: tuple[str, ...] = ("mkdir",)


def mkdir(path: str) -> str:
    """Create a directory if it does not exist."""
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)
    return path

"""\
Errata
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

Structured, classified errors for Python.

This package (errata) provides a family of exceptions that behave like
the built-in exception they stand for (an `ArithmeticError`, an
`OSError`, an `IndexError` and so on) while carrying a stable error
class identifier. The message of a classified error, and its SQL state,
come from a catalog of error classes, which keeps the text users see and
the identifiers programs match on consistent with each other.

Read complete documentation at: https://github.com/xames3/errata.
"""

from __future__ import annotations

from .core import *
from .utils import *


__all__: tuple[str, ...] = ("__version__",)
__all__ += core.__all__
__all__ += utils.__all__

__version__: str = "18.10.2026"

"""\
Resources
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This package holds the data files bundled with this framework, namely
the default error-class catalog.
"""

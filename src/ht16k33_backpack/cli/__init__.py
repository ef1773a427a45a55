"""
HT16K33 Backpack Command-Line Interface
=======================================

This package provides the ``htseg`` tool, a Click-based CLI that opens
a display, runs one command and releases it again.
"""

__all__ = ["htseg"]

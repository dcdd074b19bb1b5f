"""
VALGOL Command-Line Interface
=============================

This package provides command-line tools for the VALGOL toolchain:

- **vgc**: VALGOL I translator (source to assembly)
- **vgm**: VALGOL I machine (run assembly or source)

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["vgc", "vgm"]

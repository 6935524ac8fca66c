"""
TI-83 Plus SDK Command-Line Interface
=====================================

- **tiasm**: Z80 assembler producing .8xp programs

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["tiasm"]

"""
Command-line interface for projsearch.
"""

from .main import cli, main

__all__ = [
    "cli",
    "main",
]

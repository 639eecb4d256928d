"""
Run module: CLI and output reporters.
"""

from .cli import main
from .report import TextReporter, JsonReporter, build_report

__all__ = ["main", "TextReporter", "JsonReporter", "build_report"]

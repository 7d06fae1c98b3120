"""
Utility helpers that sit beside the instance model.

• Logging colour codes, console formatter and progress bars (`logging.py`).
"""

from .logging import Colors, ProgressTracker, SimpleFormatter, Symbols, setup_logging

__all__ = [
    "Colors",
    "ProgressTracker",
    "SimpleFormatter",
    "Symbols",
    "setup_logging",
]

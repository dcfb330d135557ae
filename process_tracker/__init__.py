"""Process Tracker: cumulative running time of desktop applications."""

from __future__ import annotations

__all__ = [
    "app",
    "core",
    "data",
    "models",
    "runner",
    "storage",
    "tracking",
]

__version__ = "0.1.0"

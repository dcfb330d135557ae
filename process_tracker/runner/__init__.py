"""Poll loop and console output."""

from .render import format_duration, render_cycle
from .tracker import ProcessTracker

__all__ = ["ProcessTracker", "format_duration", "render_cycle"]

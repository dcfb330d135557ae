"""Data provider package."""

from .processes import collect_raw_observations

__all__ = ["collect_raw_observations"]

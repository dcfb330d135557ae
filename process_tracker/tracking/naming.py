"""Human-readable display names for process executables."""

from __future__ import annotations

import re
from collections.abc import Iterable

NAME_SEPARATORS = ("-", "_", ".")
EXTENSION = ".exe"

_CAPITALISED_WORD = re.compile(r"([A-Z][a-z]+)")


def _capitalise(segment: str) -> str:
    return segment[:1].upper() + segment[1:]


def normalize(raw_name: str, overrides: Iterable[tuple[str, str]] = ()) -> str:
    """Return a pretty version of a process executable name.

    Apply exactly once to the raw identity: re-normalising an already pretty
    name may change its spacing.
    """

    for suffix, pretty_name in overrides:
        if raw_name.endswith(suffix):
            return pretty_name

    name = raw_name
    if name.lower().endswith(EXTENSION):
        name = name[: -len(EXTENSION)]
    if not name:
        return raw_name

    separator = next((s for s in NAME_SEPARATORS if s in name), None)
    if separator is not None:
        parts = [_capitalise(part) for part in name.split(separator) if part]
        return " ".join(parts) if parts else name

    if all(c.islower() or c.isdigit() for c in name):
        return _capitalise(name)

    # PascalCase to Title Case, trailing acronyms (ShareX) stay attached
    spaced = _CAPITALISED_WORD.sub(r" \1", name)
    return " ".join(spaced.split())

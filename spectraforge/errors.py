"""Exception taxonomy for the generation pipeline."""

from __future__ import annotations


class SpectraForgeError(Exception):
    """Base class for all pipeline errors."""


class InvalidParameter(SpectraForgeError, ValueError):
    """Unknown style, palette, or resolution reference.

    Raised before any drawing begins.
    """

    def __init__(self, kind: str, value: object, choices: list[str] | None = None):
        self.kind = kind
        self.value = value
        self.choices = list(choices or [])
        msg = f"Unknown {kind}: {value!r}"
        if self.choices:
            msg += f" (expected one of: {', '.join(self.choices)})"
        super().__init__(msg)


class SurfaceUnavailable(SpectraForgeError, RuntimeError):
    """The drawing surface could not be acquired or sized."""

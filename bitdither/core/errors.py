"""Exceptions raised by the dithering engine.

Everything derives from ValueError: these are all caller errors
(bad tag, bad options, bad buffer) and are never retried.
"""

from __future__ import annotations


class DitherError(ValueError):
    """Base class for engine errors."""


class UnknownAlgorithm(DitherError):
    def __init__(self, name: object, valid: list[str] | None = None) -> None:
        self.name = name
        message = f"Unknown algorithm: {name}"
        if valid:
            message += f". Valid names: {', '.join(valid)}"
        super().__init__(message)


class MissingCustomHandler(DitherError):
    def __init__(self) -> None:
        super().__init__(
            "CUSTOM algorithm requires a callable in DitherOptions.custom"
        )


class InvalidOptions(DitherError):
    """Configuration rejected before any pixel was touched."""


class InvalidBitmap(DitherError):
    """Pixel buffer does not match its declared width and height."""

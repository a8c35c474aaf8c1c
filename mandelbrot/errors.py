"""Exceptions raised by the Mandelbrot core."""

from __future__ import annotations

from typing import Optional


class MandelbrotError(Exception):
    """Base class for every failure raised by this package."""


class InvalidConfiguration(MandelbrotError, ValueError):
    """Grid parameters rejected before any computation started."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class DimensionMismatch(MandelbrotError, ValueError):
    pass


class MalformedGrid(MandelbrotError, ValueError):
    """A grid text file could not be parsed."""

    def __init__(self, message: str, *, line: Optional[int] = None, field: Optional[str] = None) -> None:
        location = f"line {line}: " if line is not None else ""
        super().__init__(f"{location}{message}")
        self.line = line
        self.field = field


class ComplexDivisionByZero(MandelbrotError, ZeroDivisionError):
    pass


class GenerationCancelled(MandelbrotError, RuntimeError):
    """Grid generation was stopped by the caller before it finished."""

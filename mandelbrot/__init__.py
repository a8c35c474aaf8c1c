"""Public API for Mandelbrot rendering utilities."""

from .codec import deserialize, load_grid, save_grid, serialize
from .complex import Complex, equals
from .errors import (
    ComplexDivisionByZero,
    DimensionMismatch,
    GenerationCancelled,
    InvalidConfiguration,
    MalformedGrid,
    MandelbrotError,
)
from .intensity import MAX_INTENSITY, legacy_intensity, to_intensity
from .renderer import (
    BACKENDS,
    GridParameters,
    RenderResult,
    escape_count,
    generate,
    generate_tensor,
    render_frame,
)

__all__ = [
    "BACKENDS",
    "Complex",
    "ComplexDivisionByZero",
    "DimensionMismatch",
    "GenerationCancelled",
    "GridParameters",
    "InvalidConfiguration",
    "MAX_INTENSITY",
    "MalformedGrid",
    "MandelbrotError",
    "RenderResult",
    "deserialize",
    "equals",
    "escape_count",
    "generate",
    "generate_tensor",
    "legacy_intensity",
    "load_grid",
    "render_frame",
    "save_grid",
    "serialize",
    "to_intensity",
]

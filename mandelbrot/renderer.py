"""Escape-time evaluation of the Mandelbrot set over a sampling grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
import tensorflow as tf

from .complex import ZERO, Complex
from .errors import GenerationCancelled, InvalidConfiguration
from .intensity import to_intensity

BACKENDS = ("python", "tensorflow")


@dataclass(frozen=True)
class GridParameters:
    """Region of the complex plane and the grid used to sample it.

    ``(x_start, y_start)`` is the corner of the region sampled by cell
    ``(0, 0)``. Cell ``(row, col)`` samples ``x_start + col*dx`` on the
    real axis and ``y_start + row*dy`` on the imaginary axis, so the last
    row and column land exactly on the far edges of the region.
    """

    x_start: float
    y_start: float
    width: float
    height: float
    rows: int
    cols: int
    max_iterations: int
    max_modulus: float

    def validate(self) -> "GridParameters":
        for name in ("x_start", "y_start", "width", "height"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfiguration(name, "must be a finite number")
        if not self.width > 0:
            raise InvalidConfiguration("width", f"must be positive, got {self.width}")
        if not self.height > 0:
            raise InvalidConfiguration("height", f"must be positive, got {self.height}")
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if not isinstance(value, (int, np.integer)) or value < 2:
                raise InvalidConfiguration(name, f"must be an integer >= 2, got {value!r}")
        if not isinstance(self.max_iterations, (int, np.integer)) or self.max_iterations < 1:
            raise InvalidConfiguration("max_iterations", f"must be an integer >= 1, got {self.max_iterations!r}")
        if self.max_iterations > np.iinfo(np.int32).max:
            raise InvalidConfiguration("max_iterations", "does not fit in a 32-bit grid")
        if not self.max_modulus > 0:
            raise InvalidConfiguration("max_modulus", f"must be positive, got {self.max_modulus}")
        return self

    @property
    def dx(self) -> float:
        return self.width / (self.cols - 1)

    @property
    def dy(self) -> float:
        return self.height / (self.rows - 1)

    @property
    def shape(self) -> tuple[int, int]:
        return int(self.rows), int(self.cols)

    def to_complex(self, row: int, col: int) -> Complex:
        return Complex(self.x_start + col * self.dx, self.y_start + row * self.dy)


@dataclass(frozen=True)
class RenderResult:
    """An iteration-count grid together with the pixels derived from it."""

    iterations: np.ndarray
    pixels: np.ndarray
    params: GridParameters


def escape_count(c: Complex, max_iterations: int, max_modulus: float) -> int:
    """Iterate ``z <- z*z + c`` from zero and count the steps until escape.

    Returns ``max_iterations`` when the orbit stays inside the threshold
    for the whole budget.
    """

    z = ZERO
    count = 0
    while count < max_iterations:
        z = z * z + c
        count += 1
        # inf - inf produces NaN after overflow; treat it as escaped.
        if not z.modulus < max_modulus:
            break
    return count


def generate(params: GridParameters, *, should_cancel: Optional[Callable[[], bool]] = None) -> np.ndarray:
    """Evaluate every cell of the grid, one at a time.

    ``should_cancel`` is polled between rows; when it returns true the
    partially filled grid is discarded and ``GenerationCancelled`` is
    raised.
    """

    params.validate()
    rows, cols = params.shape
    dx = params.dx
    dy = params.dy

    counts = np.zeros((rows, cols), dtype=np.int32)
    for row in range(rows):
        if should_cancel is not None and should_cancel():
            raise GenerationCancelled(f"cancelled after {row} of {rows} rows")
        imaginary = params.y_start + row * dy
        for col in range(cols):
            c = Complex(params.x_start + col * dx, imaginary)
            counts[row, col] = escape_count(c, params.max_iterations, params.max_modulus)
    counts.setflags(write=False)
    return counts


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
    max_iterations: tf.Tensor,
    max_modulus: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance the orbit of every cell that has not escaped yet."""

    zr_new = (zr * zr - zi * zi) + cr
    zi_new = (zr * zi + zi * zr) + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    ns = ns + tf.cast(active, tf.int32)
    modulus = tf.sqrt(zr * zr + zi * zi)
    inside = tf.less(modulus, max_modulus)
    new_active = tf.logical_and(tf.logical_and(active, inside), tf.less(ns, max_iterations))
    return zr, zi, ns, new_active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor, max_modulus: tf.Tensor) -> tf.Tensor:
    """Iterate all cells with a TensorFlow while loop until none is active."""

    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    ns = tf.zeros_like(cr, tf.int32)
    active = tf.ones_like(ns, tf.bool)

    def cond(zr, zi, ns, active):
        return tf.reduce_any(active)

    def body(zr, zi, ns, active):
        return _escape_step(zr, zi, cr, ci, ns, active, max_iterations, max_modulus)

    _, _, ns, _ = tf.while_loop(cond, body, (zr, zi, ns, active))
    return ns


def generate_tensor(params: GridParameters, *, device: Optional[str] = None) -> np.ndarray:
    """Evaluate the whole grid at once with TensorFlow in float64.

    Produces the same grid as :func:`generate`; every arithmetic step is
    performed in the same order on the same doubles.
    """

    params.validate()
    rows, cols = params.shape

    x = params.x_start + np.arange(cols, dtype=np.float64) * np.float64(params.dx)
    y = params.y_start + np.arange(rows, dtype=np.float64) * np.float64(params.dy)
    X, Y = np.meshgrid(x, y)

    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(X, dtype=tf.float64)
        ci = tf.convert_to_tensor(Y, dtype=tf.float64)
        max_iterations = tf.constant(params.max_iterations, dtype=tf.int32)
        max_modulus = tf.constant(params.max_modulus, dtype=tf.float64)
        ns = _escape_run(cr, ci, max_iterations, max_modulus)

    counts = ns.numpy().astype(np.int32)
    counts.setflags(write=False)
    return counts


def render_frame(params: GridParameters, *, backend: str = "python", device: Optional[str] = None) -> RenderResult:
    """Generate the iteration grid for ``params`` and map it to pixels."""

    if backend == "python":
        iterations = generate(params)
    elif backend == "tensorflow":
        iterations = generate_tensor(params, device=device)
    else:
        raise InvalidConfiguration("backend", f"expected one of {', '.join(BACKENDS)}, got {backend!r}")

    pixels = to_intensity(iterations, params.max_iterations, shape=params.shape)
    return RenderResult(iterations=iterations, pixels=pixels, params=params)

"""Grayscale intensity mapping for iteration-count grids."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import DimensionMismatch

MAX_INTENSITY = 65535
LEGACY_OFFSET = 20000


def _check_shape(grid: np.ndarray, shape: Optional[tuple[int, int]]) -> np.ndarray:
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise DimensionMismatch(f"expected a 2-D grid, got {grid.ndim} dimension(s)")
    if shape is not None and tuple(grid.shape) != tuple(shape):
        raise DimensionMismatch(f"grid has shape {grid.shape}, expected {tuple(shape)}")
    return grid


def to_intensity(grid: np.ndarray, max_iterations: int, shape: Optional[tuple[int, int]] = None) -> np.ndarray:
    """Map iteration counts to 16-bit grayscale.

    Cells that reached ``max_iterations`` are black. Every other cell is
    ``MAX_INTENSITY - count``: orbits that escape quickly are bright and
    slower ones progressively darker. Counts too large for the channel
    clip to black.
    """

    grid = _check_shape(grid, shape)
    counts = grid.astype(np.int64, copy=False)
    values = np.clip(MAX_INTENSITY - counts, 0, MAX_INTENSITY)
    values = np.where(counts == max_iterations, 0, values)
    return values.astype(np.uint16)


def legacy_intensity(grid: np.ndarray, shape: Optional[tuple[int, int]] = None) -> np.ndarray:
    """Palette used by images saved with the original desktop viewer.

    Zero stays black; any other count ``v`` becomes
    ``MAX_INTENSITY - v - LEGACY_OFFSET`` wrapped to 16 bits.
    """

    grid = _check_shape(grid, shape)
    counts = grid.astype(np.int64, copy=False)
    values = np.mod(MAX_INTENSITY - counts - LEGACY_OFFSET, MAX_INTENSITY + 1)
    values = np.where(counts == 0, 0, values)
    return values.astype(np.uint16)

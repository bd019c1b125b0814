from __future__ import annotations

import numpy as np

from fractals.base import PlaneWindow
from fractals.config import ConfigError


def axis_samples(n: int, lo: float, hi: float) -> np.ndarray:
    """
    Map pixel indices 0..n-1 linearly from [0, n) onto [lo, hi].
    Index 0 is exactly lo; index n (never sampled) would be hi.
    """
    idx = np.arange(n, dtype=np.float64)
    return lo + (hi - lo) * (idx / n) if n > 0 else idx


def build_field(width: int, height: int, window: PlaneWindow) -> np.ndarray:
    """
    Build the sampled complex field for a pixel grid.

    Returns a complex128 array of shape (height, width): column i holds the
    real part for pixel i, row j the imaginary part for pixel j.
    A zero width or height gives an empty field.
    """
    width, height = int(width), int(height)
    if width < 0 or height < 0:
        raise ConfigError(f"Field size must be non-negative, got {width}x{height}.")

    real = axis_samples(width, window.x_min, window.x_max)
    imag = axis_samples(height, window.y_min, window.y_max)
    real_grid, imag_grid = np.meshgrid(real, imag)

    field = np.empty((height, width), dtype=np.complex128)
    field.real = real_grid
    field.imag = imag_grid
    return field

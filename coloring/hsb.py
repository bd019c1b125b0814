from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from coloring.base import ColoringStrategy, ColoringError, ALPHA
from fractals.base import BaseColor, EscapeResult, FieldResult, RenderConfig
from kernel_sources.cpu.escape_time import continuous_value, continuous_value_nogil

HUE_MAX = 360.0
SATURATION_MAX = 100.0
BRIGHTNESS_MAX = 100.0

_EPS = 1e-12
_LOG2 = math.log(2.0)


def color_value(result: EscapeResult, escape_coloring: bool, max_iterations: int) -> float:
    """
    Continuous (renormalized) escape count: n - log(log|Z|) / log 2.

    With escape_coloring on, samples that used up max_iterations get a flat 0.0.
    |Z| and log|Z| are floored just above 1 and 0 so orbits that never left
    the unit disk give a finite value instead of NaN. An orbit that overflowed
    to NaN or inf falls back to its raw iteration count.
    """
    if escape_coloring and result.iterations == max_iterations:
        return 0.0
    mag = result.final_z.modulus()
    if not math.isfinite(mag):
        return float(result.iterations)
    mag = max(mag, 1.0 + _EPS)
    log_mag = max(math.log(mag), _EPS)
    return result.iterations - math.log(log_mag) / _LOG2


def _norm(value: float, max_value: float) -> float:
    return value if value <= max_value else value / max_value


def normalize_hsb(base: BaseColor, value: float) -> Tuple[float, float, float]:
    """
    Add a color value to each base channel. A sum above the channel maximum
    is normalized to sum / max; anything at or below the maximum, negatives
    included, passes through unchanged.
    """
    return (_norm(base.hue + value, HUE_MAX),
            _norm(base.saturation + value, SATURATION_MAX),
            _norm(base.brightness + value, BRIGHTNESS_MAX))


def normalize_hsb_array(base: BaseColor, values: np.ndarray, out: np.ndarray) -> np.ndarray:
    """Vectorized normalize_hsb writing channels 0..2 of `out` (shape values.shape + (4,))."""
    for ch, (offset, max_value) in enumerate(((base.hue, HUE_MAX),
                                              (base.saturation, SATURATION_MAX),
                                              (base.brightness, BRIGHTNESS_MAX))):
        summed = values + offset
        out[..., ch] = np.where(summed <= max_value, summed, summed / max_value)
    return out


def check_color_count(n_values: int, n_pixels: int) -> None:
    if n_values != n_pixels:
        raise ColoringError(
            f"Cannot color fractal: {n_values} color values for {n_pixels} pixels.")


def color_fractal(base: BaseColor, color_values: Sequence[float],
                  pixels: Sequence[int], buffer: np.ndarray) -> np.ndarray:
    """
    Write one (hue, saturation, brightness, alpha) quadruple per color value
    into `buffer` at the matching flat pixel index. Per-pixel form of
    HSBColoring.apply, for painting an arbitrary subset of pixels.

    Parameters:
        base: base color requested by the caller.
        color_values: values produced by color_value().
        pixels: flat (row-major) pixel index for each value.
        buffer: array whose last axis has 4 channels.
    """
    check_color_count(len(color_values), len(pixels))
    if buffer.shape[-1] != 4 or not buffer.flags.c_contiguous:
        raise ColoringError("Cannot color fractal: buffer must be C-contiguous with 4 channels.")
    flat = buffer.reshape(-1, 4)
    for value, pixel in zip(color_values, pixels):
        if not 0 <= pixel < flat.shape[0]:
            raise ColoringError(f"Cannot color fractal: pixel {pixel} outside buffer of {flat.shape[0]}.")
        h, s, b = normalize_hsb(base, value)
        flat[pixel] = (h, s, b, ALPHA)
    return buffer


class HSBColoring(ColoringStrategy):
    """Continuous escape coloring on top of a base HSB color."""

    def color_values(self, result: FieldResult, config: RenderConfig, *, parallel: bool = True) -> np.ndarray:
        values = np.zeros(result.shape, dtype=np.float64)
        if values.size:
            kernel = continuous_value if parallel else continuous_value_nogil
            kernel(int(config.max_iterations), bool(config.escape_coloring),
                   result.iterations,
                   np.ascontiguousarray(result.final_z.real),
                   np.ascontiguousarray(result.final_z.imag),
                   values)
        return values

    def apply(self, result: FieldResult, config: RenderConfig,
              out: Optional[np.ndarray] = None, *, parallel: bool = True) -> np.ndarray:
        shape = tuple(result.shape) + (4,)
        if out is None:
            out = np.empty(shape, dtype=np.float64)
        else:
            check_color_count(int(np.prod(result.shape)), out.size // 4)
        if out.shape != shape:
            raise ColoringError(f"Cannot color fractal: buffer shape {out.shape} does not match {shape}.")

        values = self.color_values(result, config, parallel=parallel)
        normalize_hsb_array(config.base_color, values, out)
        out[..., 3] = ALPHA
        return out

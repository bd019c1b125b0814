from __future__ import annotations

import numpy as np

from fractals.base import RenderConfig, EscapeResult, FieldResult, Standard, Parameterized
from fractals.complex import Complex
from kernel_sources.cpu.escape_time import escape_iter, escape_iter_nogil


def _iteration_constant(sample: Complex, config: RenderConfig) -> Complex:
    variant = config.variant
    if isinstance(variant, Standard):
        return sample
    if isinstance(variant, Parameterized):
        return variant.constant
    raise TypeError(f"Unknown fractal variant: {variant!r}")


def evaluate(sample: Complex, config: RenderConfig) -> EscapeResult:
    """
    Iterate Z <- Z*Z + C from Z0 = sample until |Z| reaches the escape radius
    or max_iterations is hit. At least one iteration is always performed.
    """
    c = _iteration_constant(sample, config)
    radius_sq = config.escape_radius_sq
    z = sample
    n = 0
    while True:
        z = z.multiply(z).add(c)
        n += 1
        # An overflowed orbit (NaN or inf) has escaped too
        if not (z.modulus_squared() < radius_sq):
            return EscapeResult(iterations=n, final_z=z, escaped=True)
        if n >= config.max_iterations:
            return EscapeResult(iterations=n, final_z=z, escaped=False)


def evaluate_field(field: np.ndarray, config: RenderConfig, *, parallel: bool = True) -> FieldResult:
    """
    Evaluate every sample of a field. Bit-identical to calling evaluate() per pixel.

    parallel=True spreads rows over numba's thread pool; parallel=False runs a
    GIL-free serial kernel meant for callers that manage their own threads.
    """
    field = np.ascontiguousarray(field, dtype=np.complex128)
    if field.ndim != 2:
        raise ValueError(f"Field must be 2D, got shape {field.shape}.")

    variant = config.variant
    if isinstance(variant, Standard):
        c_re, c_im, use_sample_c = 0.0, 0.0, True
    elif isinstance(variant, Parameterized):
        c_re, c_im, use_sample_c = float(variant.constant.re), float(variant.constant.im), False
    else:
        raise TypeError(f"Unknown fractal variant: {variant!r}")

    iter_raw = np.zeros(field.shape, dtype=np.int32)
    z_re = np.zeros(field.shape, dtype=np.float64)
    z_im = np.zeros(field.shape, dtype=np.float64)
    escaped = np.zeros(field.shape, dtype=np.bool_)

    if field.size:
        kernel = escape_iter if parallel else escape_iter_nogil
        kernel(field, c_re, c_im, use_sample_c,
               int(config.max_iterations), float(config.escape_radius_sq),
               iter_raw, z_re, z_im, escaped)

    final_z = np.empty(field.shape, dtype=np.complex128)
    final_z.real = z_re
    final_z.imag = z_im
    return FieldResult(iterations=iter_raw, final_z=final_z, escaped=escaped)

import math

from numba import njit, prange

LOG2 = math.log(2.0)
EPS = 1e-12


@njit(nogil=True)
def continuous_value_at(n, zr, zi, max_iter, escape_coloring):
    if escape_coloring and n == max_iter:
        return 0.0
    mag = math.sqrt(zr*zr + zi*zi)
    # Overflowed orbit: fall back to the raw count
    if not math.isfinite(mag):
        return float(n)
    # Floors only bite for orbits that never left the unit disk
    if mag < 1.0 + EPS:
        mag = 1.0 + EPS
    log_mag = math.log(mag)
    if log_mag < EPS:
        log_mag = EPS
    return n - math.log(log_mag) / LOG2


def _continuous_value(max_iter, escape_coloring, iter_raw, z_re, z_im, out):
    H, W = iter_raw.shape
    for y in prange(H):
        for x in range(W):
            out[y, x] = continuous_value_at(iter_raw[y, x], z_re[y, x], z_im[y, x],
                                            max_iter, escape_coloring)


continuous_value = njit(parallel=True)(_continuous_value)

continuous_value_nogil = njit(nogil=True)(_continuous_value)

from numba import njit, prange


def _escape_iter(field, c_re, c_im, use_sample_c, max_iter, radius_sq,
                 iter_raw, z_re, z_im, escaped):
    H, W = iter_raw.shape
    for y in prange(H):
        for x in range(W):
            zr = field[y, x].real
            zi = field[y, x].imag
            if use_sample_c:
                cr = zr
                ci = zi
            else:
                cr = c_re
                ci = c_im

            n = 0
            mag2 = zr*zr + zi*zi
            while True:
                # Same operation order as Complex.multiply then Complex.add
                tr = zr*zr - zi*zi
                ti = zr*zi + zi*zr
                zr = tr + cr
                zi = ti + ci
                n += 1
                mag2 = zr*zr + zi*zi
                # NaN or inf after an overflow counts as escaped
                if not (mag2 < radius_sq) or n >= max_iter:
                    break

            iter_raw[y, x] = n
            z_re[y, x] = zr
            z_im[y, x] = zi
            escaped[y, x] = not (mag2 < radius_sq)


# Full-frame sweep: rows spread over numba's own thread pool.
escape_iter = njit(parallel=True)(_escape_iter)

# Band sweep for callers that bring their own threads.
escape_iter_nogil = njit(nogil=True)(_escape_iter)

import math

import numpy as np
import pytest

from fractals.complex import Complex, add, multiply, modulus, modulus_squared


def test_add_and_multiply():
    a = Complex(1.0, 2.0)
    b = Complex(3.0, -4.0)
    assert add(a, b) == Complex(4.0, -2.0)
    # (1 + 2i)(3 - 4i) = 3 - 4i + 6i + 8 = 11 + 2i
    assert multiply(a, b) == Complex(11.0, 2.0)
    assert a + b == add(a, b)
    assert a * b == multiply(a, b)


def test_operations_return_new_values():
    a = Complex(1.0, 1.0)
    b = a.add(Complex(1.0, 0.0))
    assert a == Complex(1.0, 1.0)
    assert b is not a
    with pytest.raises(AttributeError):
        a.re = 5.0


def test_modulus():
    z = Complex(3.0, 4.0)
    assert modulus_squared(z) == 25.0
    assert modulus(z) == 5.0
    assert modulus(Complex(10.0, 10.0)) == math.sqrt(200.0)


@pytest.mark.parametrize("value, expected", [
    (Complex(1.0, 2.0), Complex(1.0, 2.0)),
    (1.5 - 2j, Complex(1.5, -2.0)),
    ((0.25, -0.5), Complex(0.25, -0.5)),
    (0.285, Complex(0.285, 0.285)),
    (2, Complex(2.0, 2.0)),
    (np.int64(3), Complex(3.0, 3.0)),
    (np.float32(0.5), Complex(0.5, 0.5)),
])
def test_of(value, expected):
    assert Complex.of(value) == expected


def test_of_rejects_bad_input():
    with pytest.raises(TypeError):
        Complex.of("1+2j")
    with pytest.raises(TypeError):
        Complex.of(True)
    with pytest.raises(ValueError):
        Complex.of((1.0, 2.0, 3.0))

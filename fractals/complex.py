from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Complex:
    """
    Immutable complex value made of two real components.
    Every operation returns a new value.
    """
    re: float
    im: float

    @staticmethod
    def of(value: Any) -> Complex:
        """
        Build a Complex from another Complex, a Python complex, an (re, im)
        pair, or a real scalar c, which stands for c + c*i.
        """
        if isinstance(value, Complex):
            return Complex(value.re, value.im)
        if isinstance(value, complex):
            return Complex(value.real, value.imag)
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise ValueError(f"Expected an (re, im) pair, got {len(value)} items.")
            return Complex(float(value[0]), float(value[1]))
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            return Complex(float(value), float(value))
        raise TypeError(f"Cannot build a Complex from {type(value).__name__}.")

    def add(self, other: Complex) -> Complex:
        return Complex(self.re + other.re, self.im + other.im)

    def multiply(self, other: Complex) -> Complex:
        # (a + bi)(c + di) = (ac - bd) + (ad + bc)i
        return Complex(self.re * other.re - self.im * other.im,
                       self.re * other.im + self.im * other.re)

    def modulus_squared(self) -> float:
        return self.re * self.re + self.im * self.im

    def modulus(self) -> float:
        return math.sqrt(self.modulus_squared())

    def __add__(self, other: Complex) -> Complex:
        return self.add(other)

    def __mul__(self, other: Complex) -> Complex:
        return self.multiply(other)

    def __complex__(self) -> complex:
        return complex(self.re, self.im)


def add(a: Complex, b: Complex) -> Complex:
    return a.add(b)


def multiply(a: Complex, b: Complex) -> Complex:
    return a.multiply(b)


def modulus_squared(a: Complex) -> float:
    return a.modulus_squared()


def modulus(a: Complex) -> float:
    return a.modulus()

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from fractals.complex import Complex
from utils.enums import VariantKind


@dataclass(frozen=True)
class PlaneWindow:
    """
    Rectangle of the complex plane that is sampled.
    X limits bound the real axis, Y limits bound the imaginary axis.
    Values are complex-plane units; nothing downstream re-scales them.
    """
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def bounds(self) -> tuple[float, float, float, float]:
        return self.x_min, self.x_max, self.y_min, self.y_max


@dataclass(frozen=True)
class Standard:
    """Classic Mandelbrot iteration: the sample is both Z0 and C."""

    @property
    def kind(self) -> VariantKind:
        return VariantKind.STANDARD


@dataclass(frozen=True)
class Parameterized:
    """Julia-style iteration: the sample is Z0, C is a fixed constant."""
    constant: Complex = field(default_factory=lambda: Complex(0.285, 0.285))

    @property
    def kind(self) -> VariantKind:
        return VariantKind.PARAMETERIZED


Variant = Union[Standard, Parameterized]


@dataclass(frozen=True)
class BaseColor:
    """
    Base hue/saturation/brightness offsets.
    The per-pixel color value is added to each channel.
    """
    hue: float = 0.0
    saturation: float = 0.0
    brightness: float = 0.0


@dataclass(frozen=True)
class RenderConfig:
    """
    Immutable render configuration.
    Max_iterations bounds the iteration loop per sample.
    Escape_radius is the modulus at which an orbit counts as escaped.
    Escape_coloring paints non-escaped samples with a flat value of 0.
    """
    max_iterations: int = 400
    escape_radius: float = 20.0
    escape_coloring: bool = False
    variant: Variant = field(default_factory=Standard)
    base_color: BaseColor = field(default_factory=BaseColor)
    window: PlaneWindow = field(default_factory=lambda: PlaneWindow(-2.5, 2.5, -2.5, 2.5))

    @property
    def escape_radius_sq(self) -> float:
        return self.escape_radius * self.escape_radius

    def field_key(self) -> tuple[PlaneWindow, VariantKind]:
        """Parameters the sampled field depends on."""
        return self.window, self.variant.kind


@dataclass(frozen=True)
class EscapeResult:
    iterations: int
    final_z: Complex
    escaped: bool


@dataclass(frozen=True)
class FieldResult:
    """
    Per-pixel evaluator output for a whole sampled field.
    All arrays share the field's (height, width) shape.
    """
    iterations: np.ndarray
    final_z: np.ndarray
    escaped: np.ndarray

    @property
    def shape(self) -> tuple[int, ...]:
        return self.iterations.shape

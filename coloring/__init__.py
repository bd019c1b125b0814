from .base import ColoringStrategy, ColoringError, ALPHA
from .hsb import HSBColoring, color_value, normalize_hsb, color_fractal

__all__ = [
    "ALPHA",
    "ColoringError",
    "ColoringStrategy",
    "HSBColoring",
    "color_fractal",
    "color_value",
    "normalize_hsb",
]

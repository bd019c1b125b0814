"""Escape-time fractal math: complex primitive, config, sampler, evaluator."""

from .complex import Complex, add, multiply, modulus, modulus_squared
from .base import (PlaneWindow, Standard, Parameterized, Variant, BaseColor,
                   RenderConfig, EscapeResult, FieldResult)
from .config import ConfigError, DEFAULT_CONFIG, apply_patch, validate_config
from .sampler import build_field
from .escape_time import evaluate, evaluate_field

__all__ = [
    "BaseColor",
    "Complex",
    "ConfigError",
    "DEFAULT_CONFIG",
    "EscapeResult",
    "FieldResult",
    "Parameterized",
    "PlaneWindow",
    "RenderConfig",
    "Standard",
    "Variant",
    "add",
    "apply_patch",
    "build_field",
    "evaluate",
    "evaluate_field",
    "modulus",
    "modulus_squared",
    "multiply",
    "validate_config",
]

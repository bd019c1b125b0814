from __future__ import annotations

import logging
import math
import numbers
from dataclasses import replace, fields
from typing import Any, Dict, List, Mapping

import numpy as np

from fractals.base import (RenderConfig, PlaneWindow, BaseColor, Standard,
                           Parameterized, Variant)
from fractals.complex import Complex
from utils.enums import VariantKind

logger = logging.getLogger(__name__)

# Smallest radius for which log(log(|Z|)) stays defined for escaped points.
MIN_ESCAPE_RADIUS = 2.0

DEFAULT_CONFIG = RenderConfig()

RECOGNIZED_KEYS = frozenset({
    "reset",
    "max_iterations",
    "escape_radius",
    "escape_coloring",
    "variant",
    "parameter_constant",
    "plane_window",
    "base_color",
})


class ConfigError(ValueError):
    """Aggregated render configuration error(s)."""


def validate_config(config: RenderConfig) -> None:
    """
    Validates a RenderConfig. Raises ConfigError listing every problem found.
    """
    errors: List[str] = []

    mi = config.max_iterations
    if not isinstance(mi, numbers.Integral) or isinstance(mi, bool):
        errors.append(f"max_iterations must be an integer, got {type(mi).__name__}.")
    elif mi <= 0:
        errors.append(f"max_iterations must be > 0, got {mi}.")

    er = config.escape_radius
    if not _is_real(er) or not math.isfinite(er):
        errors.append(f"escape_radius must be a finite real, got {er!r}.")
    elif er <= 0:
        errors.append(f"escape_radius must be > 0, got {er}.")
    elif er < MIN_ESCAPE_RADIUS:
        errors.append(
            f"escape_radius must be >= {MIN_ESCAPE_RADIUS} for continuous coloring, got {er}.")

    for name, value in zip(("x_min", "x_max", "y_min", "y_max"), config.window.bounds()):
        if not _is_real(value) or not math.isfinite(value):
            errors.append(f"plane_window.{name} must be a finite real, got {value!r}.")

    for f in fields(BaseColor):
        value = getattr(config.base_color, f.name)
        if not _is_real(value) or not math.isfinite(value):
            errors.append(f"base_color.{f.name} must be a finite real, got {value!r}.")

    if isinstance(config.variant, Parameterized):
        c = config.variant.constant
        if not isinstance(c, Complex) or not (math.isfinite(c.re) and math.isfinite(c.im)):
            errors.append(f"parameter_constant must be a finite Complex, got {c!r}.")
    elif not isinstance(config.variant, Standard):
        errors.append(f"variant must be Standard or Parameterized, got {config.variant!r}.")

    if errors:
        raise ConfigError("Render configuration is invalid:\n- " + "\n- ".join(errors))


def apply_patch(config: RenderConfig, patch: Mapping[str, Any]) -> RenderConfig:
    """
    Build a new RenderConfig from `config` plus the recognized fields of `patch`.
    A truthy `reset` returns the default configuration and ignores the rest.
    The result is validated; `config` itself is never modified.
    """
    if not isinstance(patch, Mapping):
        raise ConfigError(f"Config patch must be a mapping, got {type(patch).__name__}.")

    ignored = sorted(str(k) for k in patch if k not in RECOGNIZED_KEYS)
    if ignored:
        logger.debug("Ignoring unrecognized config keys: %s", ", ".join(ignored))

    if patch.get("reset"):
        return DEFAULT_CONFIG

    changes: Dict[str, Any] = {}
    try:
        if "max_iterations" in patch:
            changes["max_iterations"] = _as_int(patch["max_iterations"], "max_iterations")
        if "escape_radius" in patch:
            changes["escape_radius"] = _as_float(patch["escape_radius"], "escape_radius")
        if "escape_coloring" in patch:
            changes["escape_coloring"] = _as_bool(patch["escape_coloring"], "escape_coloring")
        if "plane_window" in patch:
            changes["window"] = _merge_window(config.window, patch["plane_window"])
        if "base_color" in patch:
            changes["base_color"] = _merge_base_color(config.base_color, patch["base_color"])
        if "variant" in patch or "parameter_constant" in patch:
            changes["variant"] = _merge_variant(config.variant,
                                                patch.get("variant"),
                                                patch.get("parameter_constant"))
    except (TypeError, ValueError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"Render configuration is invalid:\n- {e}") from e

    new_config = replace(config, **changes)
    validate_config(new_config)
    return new_config


# ---- Field parsers ------------------------------------------------------

def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got bool.")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    raise TypeError(f"{name} must be an integer, got {value!r}.")


def _as_float(value: Any, name: str) -> float:
    if not _is_real(value):
        raise TypeError(f"{name} must be a real number, got {value!r}.")
    return float(value)


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    raise TypeError(f"{name} must be a bool, got {value!r}.")


def _merge_window(current: PlaneWindow, value: Any) -> PlaneWindow:
    if isinstance(value, PlaneWindow):
        return value
    if not isinstance(value, Mapping):
        raise TypeError(f"plane_window must be a PlaneWindow or mapping, got {type(value).__name__}.")
    bounds = {}
    for name in ("x_min", "x_max", "y_min", "y_max"):
        if name in value:
            bounds[name] = _as_float(value[name], f"plane_window.{name}")
    return replace(current, **bounds)


def _merge_base_color(current: BaseColor, value: Any) -> BaseColor:
    if isinstance(value, BaseColor):
        return value
    if not isinstance(value, Mapping):
        raise TypeError(f"base_color must be a BaseColor or mapping, got {type(value).__name__}.")
    channels = {}
    for name in ("hue", "saturation", "brightness"):
        if name in value:
            channels[name] = _as_float(value[name], f"base_color.{name}")
    return replace(current, **channels)


def _variant_kind(value: Any) -> VariantKind:
    if isinstance(value, VariantKind):
        return value
    if isinstance(value, str):
        try:
            return VariantKind[value.strip().upper()]
        except KeyError:
            pass
    raise ValueError(f"variant must be 'standard' or 'parameterized', got {value!r}.")


def _merge_variant(current: Variant, variant: Any, constant: Any) -> Variant:
    if isinstance(variant, (Standard, Parameterized)):
        base = variant
    elif variant is None:
        base = current
    elif _variant_kind(variant) is VariantKind.STANDARD:
        base = Standard()
    else:
        base = current if isinstance(current, Parameterized) else Parameterized()

    if isinstance(base, Standard):
        if constant is not None:
            logger.debug("parameter_constant ignored for the standard variant")
        return base
    if constant is not None:
        return Parameterized(Complex.of(constant))
    return base

import math

import numpy as np
import pytest

from coloring.base import ALPHA, ColoringError
from coloring.hsb import HSBColoring, color_value, normalize_hsb, color_fractal
from fractals.base import BaseColor, EscapeResult, RenderConfig, PlaneWindow
from fractals.complex import Complex
from fractals.escape_time import evaluate, evaluate_field
from fractals.sampler import build_field


def test_continuous_value_for_escaped_point():
    result = EscapeResult(iterations=1, final_z=Complex(10.0, 210.0), escaped=True)
    expected = 1 - math.log(math.log(math.sqrt(100.0 + 44100.0))) / math.log(2.0)
    assert color_value(result, False, 400) == pytest.approx(expected)
    # escape coloring does not touch escaped points
    assert color_value(result, True, 400) == pytest.approx(expected)


def test_flat_interior_with_escape_coloring():
    result = EscapeResult(iterations=400, final_z=Complex(0.0, 0.0), escaped=False)
    assert color_value(result, True, 400) == 0.0


def test_interior_without_escape_coloring_stays_finite():
    result = EscapeResult(iterations=400, final_z=Complex(0.0, 0.0), escaped=False)
    value = color_value(result, False, 400)
    assert math.isfinite(value)
    assert value > 400


def test_normalize_hsb_wraps_overflow():
    hue, sat, bri = normalize_hsb(BaseColor(350.0, 0.0, 0.0), 20.0)
    assert hue < 360.0
    assert hue == pytest.approx(370.0 / 360.0)
    assert sat == 20.0
    assert bri == 20.0


def test_normalize_hsb_passes_through_in_range():
    assert normalize_hsb(BaseColor(100.0, 0.0, 0.0), 20.0)[0] == 120.0
    # exactly at the maximum is not wrapped
    assert normalize_hsb(BaseColor(340.0, 80.0, 80.0), 20.0) == (360.0, 100.0, 100.0)


def test_normalize_hsb_saturation_and_brightness_overflow():
    _, sat, bri = normalize_hsb(BaseColor(0.0, 90.0, 95.0), 20.0)
    assert sat == pytest.approx(1.1)
    assert bri == pytest.approx(1.15)


def test_normalize_hsb_negative_sums_are_untouched():
    assert normalize_hsb(BaseColor(-50.0, -10.0, 0.0), 10.0) == (-40.0, 0.0, 10.0)


def test_color_fractal_writes_quadruples():
    buffer = np.zeros((2, 2, 4))
    color_fractal(BaseColor(100.0, 10.0, 10.0), [5.0, 1.0], [3, 0], buffer)
    assert tuple(buffer[1, 1]) == (105.0, 15.0, 15.0, ALPHA)
    assert tuple(buffer[0, 0]) == (101.0, 11.0, 11.0, ALPHA)
    assert tuple(buffer[0, 1]) == (0.0, 0.0, 0.0, 0.0)


def test_color_fractal_rejects_length_mismatch():
    with pytest.raises(ColoringError, match="Cannot color fractal"):
        color_fractal(BaseColor(), [1.0, 2.0], [0], np.zeros((1, 2, 4)))


def test_color_fractal_rejects_out_of_range_pixel():
    with pytest.raises(ColoringError):
        color_fractal(BaseColor(), [1.0], [4], np.zeros((1, 2, 4)))


@pytest.mark.parametrize("escape_coloring", [False, True])
def test_hsb_coloring_matches_scalar_mapping(escape_coloring):
    config = RenderConfig(max_iterations=50, escape_radius=4.0, escape_coloring=escape_coloring,
                          base_color=BaseColor(200.0, 40.0, 60.0))
    field = build_field(16, 12, PlaneWindow(-2.0, 1.0, -1.5, 1.5))
    buffer = HSBColoring().apply(evaluate_field(field, config), config)

    assert buffer.shape == (12, 16, 4)
    assert np.all(buffer[..., 3] == ALPHA)
    for (j, i), sample in np.ndenumerate(field):
        result = evaluate(Complex(sample.real, sample.imag), config)
        expected = normalize_hsb(config.base_color,
                                 color_value(result, escape_coloring, config.max_iterations))
        np.testing.assert_allclose(buffer[j, i, :3], expected, rtol=1e-12)


def test_hsb_coloring_rejects_mismatched_buffer():
    config = RenderConfig(max_iterations=10)
    result = evaluate_field(build_field(4, 4, config.window), config)
    with pytest.raises(ColoringError):
        HSBColoring().apply(result, config, np.zeros((4, 5, 4)))


@pytest.mark.parametrize("final_z", [Complex(float("nan"), float("nan")),
                                     Complex(float("inf"), 0.0)])
def test_overflowed_orbit_falls_back_to_iteration_count(final_z):
    result = EscapeResult(iterations=3, final_z=final_z, escaped=True)
    assert color_value(result, False, 400) == 3.0


def test_hsb_coloring_is_finite_for_overflowing_window():
    config = RenderConfig(max_iterations=20, window=PlaneWindow(1e200, 2e200, 1e200, 2e200))
    field = build_field(8, 6, config.window)
    buffer = HSBColoring().apply(evaluate_field(field, config), config)
    assert np.isfinite(buffer).all()
    np.testing.assert_array_equal(buffer[..., 0], 1.0)


def test_hsb_coloring_rejects_pixel_count_mismatch():
    config = RenderConfig(max_iterations=10)
    result = evaluate_field(build_field(4, 4, config.window), config)
    with pytest.raises(ColoringError, match="16 color values for 20 pixels"):
        HSBColoring().apply(result, config, np.zeros((4, 5, 4)))

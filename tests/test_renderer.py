import numpy as np
import pytest

from coloring.base import ALPHA
from fractals.base import PlaneWindow, RenderConfig
from fractals.config import DEFAULT_CONFIG, ConfigError
from rendering.core import FractalRenderer
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.tile import TileEngine
from rendering.executor import CancelToken, RenderCancelled


@pytest.fixture
def renderer():
    return FractalRenderer(32, 24, RenderConfig(max_iterations=64))


def test_render_produces_full_hsba_buffer(renderer):
    buffer = renderer.render()
    assert buffer.shape == (24, 32, 4)
    assert buffer.dtype == np.float64
    assert np.all(buffer[..., 3] == ALPHA)
    assert np.all(np.isfinite(buffer))
    assert renderer.buffer is buffer
    assert renderer.render_seq == 1


def test_render_is_idempotent(renderer):
    first = renderer.render().copy()
    second = renderer.render()
    assert first.tobytes() == second.tobytes()


def test_color_only_update_keeps_field(renderer):
    field = renderer.field
    before = field.copy()
    renderer.apply_update({"base_color": {"hue": 120, "saturation": 30}})
    assert renderer.field is field
    assert np.array_equal(renderer.field, before)


def test_iteration_update_keeps_field(renderer):
    field = renderer.field
    renderer.apply_update({"max_iterations": 10, "escape_radius": 4.0, "escape_coloring": True})
    assert renderer.field is field


def test_window_update_rebuilds_field(renderer):
    field = renderer.field
    renderer.apply_update({"plane_window": {"x_min": -1.0, "x_max": 1.0, "y_min": -0.5, "y_max": 0.5}})
    assert renderer.field is not field
    assert renderer.field[0, 0] == complex(-1.0, -0.5)
    assert renderer.field.shape == (24, 32)


def test_variant_update_rebuilds_field(renderer):
    field = renderer.field
    renderer.apply_update({"variant": "parameterized"})
    assert renderer.field is not field
    rebuilt = renderer.field
    renderer.apply_update({"parameter_constant": -0.7 + 0.27j})
    assert renderer.field is rebuilt


def test_reset_restores_defaults(renderer):
    renderer.apply_update({
        "max_iterations": 12,
        "escape_radius": 3.0,
        "escape_coloring": True,
        "variant": "parameterized",
        "plane_window": {"x_min": 0.0, "x_max": 0.1},
        "base_color": {"hue": 300},
    })
    config = renderer.apply_update({"reset": True})
    assert config == DEFAULT_CONFIG
    assert renderer.config == DEFAULT_CONFIG
    assert renderer.field[0, 0] == complex(-2.5, -2.5)


def test_color_update_changes_pixels_but_not_iterations(renderer):
    before = renderer.render().copy()
    renderer.apply_update({"base_color": {"hue": 10}})
    after = renderer.render()
    np.testing.assert_allclose(after[..., 1:], before[..., 1:])
    assert not np.array_equal(after[..., 0], before[..., 0])


def test_invalid_update_leaves_state_untouched(renderer):
    config = renderer.config
    field = renderer.field
    with pytest.raises(ConfigError):
        renderer.apply_update({"escape_radius": 0, "plane_window": {"x_min": 1.0}})
    assert renderer.config is config
    assert renderer.field is field


def test_escape_coloring_paints_interior_flat():
    renderer = FractalRenderer(16, 16, RenderConfig(max_iterations=50, escape_coloring=True))
    buffer = renderer.render()
    # the centre pixel samples 0 + 0i exactly, which never escapes
    assert renderer.field[8, 8] == 0j
    assert tuple(buffer[8, 8]) == (0.0, 0.0, 0.0, ALPHA)


def test_tiled_engine_matches_full_frame():
    config = RenderConfig(max_iterations=80)
    full = FractalRenderer(45, 30, config, engine=FullFrameEngine()).render()
    for order in ("scanline", "center-first"):
        tiled = FractalRenderer(45, 30, config, engine=TileEngine(8, 7, order=order)).render()
        np.testing.assert_allclose(tiled, full, rtol=1e-12)


def test_tile_engine_emits_every_tile():
    seen = []
    engine = TileEngine(10, 10, on_tile=lambda x0, y0, px: seen.append((x0, y0, px.shape)))
    FractalRenderer(25, 12, RenderConfig(max_iterations=20), engine=engine).render()
    assert sorted(seen) == sorted([
        (0, 0, (10, 10, 4)), (10, 0, (10, 10, 4)), (20, 0, (10, 5, 4)),
        (0, 10, (2, 10, 4)), (10, 10, (2, 10, 4)), (20, 10, (2, 5, 4)),
    ])


@pytest.mark.parametrize("engine", [FullFrameEngine(), TileEngine(8, 8)])
def test_cancelled_render_raises(engine):
    renderer = FractalRenderer(16, 16, RenderConfig(max_iterations=20), engine=engine)
    token = CancelToken()
    token.cancel()
    with pytest.raises(RenderCancelled):
        renderer.render(cancel=token)
    assert renderer.buffer is None


def test_empty_grid_renders_empty_buffer():
    renderer = FractalRenderer(0, 5)
    assert renderer.render().shape == (5, 0, 4)
    tiled = FractalRenderer(0, 5, engine=TileEngine(4, 4))
    assert tiled.render().shape == (5, 0, 4)


def test_parameterized_render_differs_from_standard(renderer):
    standard = renderer.render().copy()
    renderer.apply_update({"variant": "parameterized", "parameter_constant": -0.8 + 0.156j})
    assert not np.array_equal(renderer.render(), standard)


def test_window_is_not_rescaled():
    window = PlaneWindow(-0.75, -0.25, 0.0, 0.5)
    renderer = FractalRenderer(10, 10, RenderConfig(window=window))
    assert renderer.field[0, 0] == complex(-0.75, 0.0)
    assert renderer.field[0, 1].real == pytest.approx(-0.7)


def test_telemetry_receives_render_time():
    messages = []
    FractalRenderer(8, 8, RenderConfig(max_iterations=10), telemetry=messages.append).render()
    assert any(m.startswith("Render time:") for m in messages)


@pytest.mark.parametrize("engine", [FullFrameEngine(), TileEngine(4, 4)])
def test_huge_window_renders_finite_buffer(renderer, engine):
    renderer.set_engine(engine)
    renderer.apply_update({"plane_window": {"x_min": 1e200, "x_max": 2e200,
                                            "y_min": 1e200, "y_max": 2e200}})
    buffer = renderer.render()
    assert np.isfinite(buffer).all()

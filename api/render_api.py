from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import numpy as np

from fractals.base import RenderConfig
from fractals.complex import Complex
from rendering.core import FractalRenderer, WIDTH, HEIGHT
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.tile import TileEngine
from rendering.events import FrameEvent, TileEvent, LogEvent
from rendering.executor import CancelToken
from utils.enums import EngineMode

logger = logging.getLogger(__name__)


class RenderConfigBuilder:
    """
    Fluent builder for a config patch.
    """
    def __init__(self, api: Optional[RenderAPI] = None):
        self.api = api
        self._patch: Dict[str, Any] = {}

    def reset(self) -> 'RenderConfigBuilder':
        self._patch["reset"] = True
        return self

    def max_iterations(self, value: int) -> 'RenderConfigBuilder':
        self._patch["max_iterations"] = value
        return self

    def escape_radius(self, value: float) -> 'RenderConfigBuilder':
        self._patch["escape_radius"] = value
        return self

    def escape_coloring(self, enabled: bool = True) -> 'RenderConfigBuilder':
        self._patch["escape_coloring"] = enabled
        return self

    def standard(self) -> 'RenderConfigBuilder':
        self._patch["variant"] = "standard"
        self._patch.pop("parameter_constant", None)
        return self

    def parameterized(self, constant: Any = None) -> 'RenderConfigBuilder':
        self._patch["variant"] = "parameterized"
        if constant is not None:
            self._patch["parameter_constant"] = Complex.of(constant)
        return self

    def window(self, x_min: float, x_max: float, y_min: float, y_max: float) -> 'RenderConfigBuilder':
        self._patch["plane_window"] = {"x_min": x_min, "x_max": x_max,
                                       "y_min": y_min, "y_max": y_max}
        return self

    def square_window(self, lo: float, hi: float) -> 'RenderConfigBuilder':
        """Use the same [lo, hi] range on both axes."""
        return self.window(lo, hi, lo, hi)

    def base_color(self, hue: float = None, saturation: float = None,
                   brightness: float = None) -> 'RenderConfigBuilder':
        color = self._patch.setdefault("base_color", {})
        if hue is not None:
            color["hue"] = hue
        if saturation is not None:
            color["saturation"] = saturation
        if brightness is not None:
            color["brightness"] = brightness
        return self

    def build(self) -> Dict[str, Any]:
        return dict(self._patch)

    def apply(self) -> RenderConfig:
        if self.api is None:
            raise RuntimeError("RenderConfigBuilder is not bound to a RenderAPI")
        return self.api.update(self.build())


class RenderAPI:
    """
    Facade exposing the two core entrypoints, update() and render_frame(),
    plus frame/tile/log callbacks for the display surface.
    """
    def __init__(self, renderer: Optional[FractalRenderer] = None,
                 width: int = WIDTH, height: int = HEIGHT):
        self.on_frame_cb: Optional[Callable[[FrameEvent], None]] = None
        self.on_tile_cb: Optional[Callable[[TileEvent], None]] = None
        self.on_log_cb: Optional[Callable[[LogEvent], None]] = None
        self.renderer: FractalRenderer = renderer or FractalRenderer(width, height, telemetry=self._emit_log)

    # ---------- Callbacks --------------------------------
    def on_frame(self, cb): self.on_frame_cb = cb
    def on_tile(self, cb): self.on_tile_cb = cb
    def on_log(self, cb): self.on_log_cb = cb

    def _emit_log(self, message: str, level: Optional[str] = None) -> None:
        if self.on_log_cb:
            self.on_log_cb(LogEvent(message, level=level))

    # ----------- Facade methods --------------------------
    @property
    def config(self) -> RenderConfig:
        return self.renderer.config

    def update(self, patch: Mapping[str, Any], render: bool = False):
        """
        Applies a configuration patch.

        Args:
            patch (Mapping): recognized keys are reset, max_iterations,
                escape_radius, escape_coloring, variant, parameter_constant,
                plane_window and base_color; anything else is ignored.
            render (bool): also render and publish a frame.

        Returns:
            The new RenderConfig, or the rendered buffer when render is True.
        """
        try:
            config = self.renderer.apply_update(patch)
        except ValueError as e:
            self._emit_log(f"[RenderAPI] Rejected update: {e}", level="error")
            raise
        if render:
            return self.render_frame()
        return config

    def render_frame(self, cancel: Optional[CancelToken] = None) -> np.ndarray:
        """
        Recomputes every pixel and publishes the buffer to the on_frame callback.

        Returns:
            np.ndarray: (height, width, 4) hue/saturation/brightness/alpha buffer.
        """
        try:
            buffer = self.renderer.render(cancel=cancel)
        except Exception as e:
            self._emit_log(f"[RenderAPI] Render error: {e}", level="error")
            raise
        if self.on_frame_cb:
            self.on_frame_cb(FrameEvent(buffer, self.renderer.width, self.renderer.height,
                                        self.renderer.render_seq))
        return buffer

    def set_engine_mode(self, mode: EngineMode, tile_w: int = 128, tile_h: int = 128,
                        order: str = "scanline") -> None:
        """
        Selects the pixel sweep strategy.

        Args:
            mode (EngineMode): FULL_FRAME or TILED.
            tile_w, tile_h (int): tile size for TILED.
            order (str): "scanline" or "center-first" for TILED.
        """
        if mode == EngineMode.FULL_FRAME:
            self.renderer.set_engine(FullFrameEngine())
        elif mode == EngineMode.TILED:
            self.renderer.set_engine(TileEngine(tile_w, tile_h, order=order, on_tile=self._publish_tile))
        else:
            raise ValueError(f"Unknown engine mode: {mode!r}")
        logger.debug("Engine mode set to %s", mode.name)

    def _publish_tile(self, x0: int, y0: int, pixels: np.ndarray) -> None:
        if self.on_tile_cb:
            h, w = pixels.shape[:2]
            self.on_tile_cb(TileEvent(x0, y0, w, h, pixels, self.renderer.render_seq + 1,
                                      self.renderer.width, self.renderer.height))

    def configure(self) -> RenderConfigBuilder:
        """
        Configures the renderer with a fluent builder pattern.

        Returns:
            RenderConfigBuilder: a builder bound to this API; call apply() to update.
        """
        return RenderConfigBuilder(self)

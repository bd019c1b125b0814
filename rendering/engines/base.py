from __future__ import annotations

from typing import Optional, Callable
import numpy as np

from fractals.base import RenderConfig
from rendering.executor import RenderExecutor, CancelToken


class BaseRenderEngine:
    """
    Base class for render engines (full-frame, tiled).

    Responsibilities:
      - Decide *how* a sampled field is decomposed into work (strategy),
      - Emit finished tiles via on_tile (if applicable),
      - Delegate *execution* to an executor.
    """

    def __init__(self, on_tile: Optional[Callable[[int, int, np.ndarray], None]] = None) -> None:
        self.on_tile: Optional[Callable[[int, int, np.ndarray], None]] = on_tile

    def emit_tile(self, x0: int, y0: int, tile_pixels: np.ndarray) -> None:
        cb = self.on_tile
        if callable(cb):
            cb(int(x0), int(y0), tile_pixels)

    def render(
        self,
        executor: RenderExecutor,
        field: np.ndarray,
        config: RenderConfig,
        cancel: Optional[CancelToken] = None,
    ) -> np.ndarray:
        """
        Must return the complete (H, W, 4) pixel buffer for `field`.
        """
        raise NotImplementedError("BaseRenderEngine.render() must be implemented by subclasses.")

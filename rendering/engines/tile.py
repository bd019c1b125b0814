from __future__ import annotations

from typing import Optional, Callable, List, Tuple
import numpy as np

from fractals.base import RenderConfig
from rendering.engines.base import BaseRenderEngine
from rendering.executor import RenderExecutor, CancelToken, Tile


class TileEngine(BaseRenderEngine):
    """
    Fixed-grid tiled rendering:
      - Splits the field into (tile_w x tile_h) tiles,
      - Renders them on the executor's thread pool,
      - Emits tiles as they finish and returns the assembled buffer.

    The output is identical to FullFrameEngine for the same field and config.
    """

    def __init__(
        self,
        tile_w: int = 128,
        tile_h: int = 128,
        order: str = "scanline",   # "scanline" | "center-first"
        on_tile: Optional[Callable[[int, int, np.ndarray], None]] = None
    ) -> None:
        super().__init__(on_tile=on_tile)
        if order not in ("scanline", "center-first"):
            raise ValueError(f"Unknown tile order: {order!r}")
        self.tile_w = max(1, int(tile_w))
        self.tile_h = max(1, int(tile_h))
        self.order = order

    def render(
        self,
        executor: RenderExecutor,
        field: np.ndarray,
        config: RenderConfig,
        cancel: Optional[CancelToken] = None,
    ) -> np.ndarray:
        H, W = field.shape
        tiles = self._compute_tiles(W, H, self.tile_w, self.tile_h)
        if self.order == "center-first":
            tiles = self._order_center_first(tiles, W, H)

        def on_done(tile: Tile, pixels: np.ndarray) -> None:
            self.emit_tile(tile[0], tile[1], pixels)

        return executor.render_tiles(field, config, tiles, cancel=cancel, on_tile=on_done)

    # ---- Helpers --------------------------------------------------------

    @staticmethod
    def _compute_tiles(W: int, H: int, tw: int, th: int) -> List[Tuple[int, int, int, int]]:
        tiles: List[Tuple[int, int, int, int]] = []
        for y0 in range(0, H, th):
            h = min(th, H - y0)
            for x0 in range(0, W, tw):
                w = min(tw, W - x0)
                tiles.append((x0, y0, w, h))
        return tiles

    @staticmethod
    def _order_center_first(tiles: List[Tuple[int, int, int, int]], W: int, H: int) -> List[Tuple[int, int, int, int]]:
        cx, cy = (W - 1) * 0.5, (H - 1) * 0.5

        def key(t):
            x0, y0, w, h = t
            tx, ty = x0 + 0.5 * w, y0 + 0.5 * h
            dx, dy = tx - cx, ty - cy
            return dx * dx + dy * dy
        return sorted(tiles, key=key)

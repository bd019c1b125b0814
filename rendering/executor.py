from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, List, Callable, Tuple

import numpy as np

from coloring.base import ColoringStrategy
from coloring.hsb import HSBColoring
from fractals.base import RenderConfig
from fractals.escape_time import evaluate_field

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]   # (x0, y0, w, h)


class RenderCancelled(RuntimeError):
    """A render was cancelled before every tile finished."""


class CancelToken:
    def __init__(self) -> None:
        self._flag = threading.Event()

    def cancel(self) -> None:
        self._flag.set()

    def is_cancelled(self) -> bool:
        return self._flag.is_set()


# ---- Executor -----------------------------------------------------------

class RenderExecutor:
    """
    Runs the evaluator and the coloring strategy over a sampled field.
    Engines decide how the field is decomposed; the executor only executes.
    """

    def __init__(
        self,
        *,
        coloring: Optional[ColoringStrategy] = None,
        max_workers: Optional[int] = None,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.coloring = coloring or HSBColoring()
        self.max_workers = max_workers
        self.log = telemetry or (lambda *_: None)

    # ---- Single render --------------------------------------------------

    def render(self, field: np.ndarray, config: RenderConfig) -> np.ndarray:
        """Evaluate and color the whole field in one parallel kernel pass."""
        result = evaluate_field(field, config, parallel=True)
        return self.coloring.apply(result, config, parallel=True)

    def render_tile(self, field: np.ndarray, config: RenderConfig, tile: Tile,
                    out: np.ndarray) -> np.ndarray:
        """Evaluate and color one tile, writing into its own slice of `out`."""
        x0, y0, w, h = tile
        view = out[y0:y0 + h, x0:x0 + w]
        result = evaluate_field(field[y0:y0 + h, x0:x0 + w], config, parallel=False)
        return self.coloring.apply(result, config, view, parallel=False)

    # ---- Tiled render ---------------------------------------------------

    def render_tiles(
        self,
        field: np.ndarray,
        config: RenderConfig,
        tiles: List[Tile],
        *,
        cancel: Optional[CancelToken] = None,
        on_tile: Optional[Callable[[Tile, np.ndarray], None]] = None,
    ) -> np.ndarray:
        """
        Render disjoint tiles on a thread pool. Each worker writes only its own
        slice of the canvas, so no locking is needed. Raises RenderCancelled if
        `cancel` fires before all tiles are done; no partial canvas is returned.
        """
        H, W = field.shape
        canvas = np.zeros((H, W, 4), dtype=np.float64)
        if not tiles:
            return canvas

        def run(tile: Tile) -> Tile:
            if cancel is not None and cancel.is_cancelled():
                return tile
            self.render_tile(field, config, tile, canvas)
            return tile

        t0 = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
            futs = [ex.submit(run, tile) for tile in tiles]
            try:
                for fut in as_completed(futs):
                    tile = fut.result()
                    if cancel is not None and cancel.is_cancelled():
                        raise RenderCancelled("Render cancelled")
                    if on_tile is not None:
                        x0, y0, w, h = tile
                        on_tile(tile, canvas[y0:y0 + h, x0:x0 + w])
            except BaseException:
                for fut in futs:
                    fut.cancel()
                raise

        elapsed = (time.perf_counter() - t0) * 1000.0
        self.log(f"[RenderExecutor] render_tiles: {len(tiles)} tiles in {elapsed:.2f} ms")
        logger.debug("Rendered %d tiles in %.2f ms", len(tiles), elapsed)
        return canvas

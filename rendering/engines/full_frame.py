from __future__ import annotations

from typing import Optional
import numpy as np

from fractals.base import RenderConfig
from rendering.engines.base import BaseRenderEngine
from rendering.executor import RenderExecutor, CancelToken, RenderCancelled


class FullFrameEngine(BaseRenderEngine):
    """
    Full-frame rendering strategy:
      - One blocking executor call over the whole field.
      - No tiles are emitted (on_tile is unused here).
    """

    def render(
        self,
        executor: RenderExecutor,
        field: np.ndarray,
        config: RenderConfig,
        cancel: Optional[CancelToken] = None,
    ) -> np.ndarray:
        if cancel is not None and cancel.is_cancelled():
            raise RenderCancelled("Render cancelled before start")
        return executor.render(field, config)

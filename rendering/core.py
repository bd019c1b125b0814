from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional

import numpy as np

from fractals.base import RenderConfig
from fractals.config import DEFAULT_CONFIG, apply_patch, validate_config
from fractals.sampler import build_field
from rendering.engines.base import BaseRenderEngine
from rendering.engines.full_frame import FullFrameEngine
from rendering.executor import RenderExecutor, CancelToken

logger = logging.getLogger(__name__)

WIDTH = 512
HEIGHT = 512


class FractalRenderer:
    """
    Render orchestrator. Owns:
      - the current (immutable) render configuration,
      - the sampled field and the parameters it was built from,
      - the last rendered pixel buffer.

    update() and render() are serialized with a lock: one writer at a time.
    """

    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        config: Optional[RenderConfig] = None,
        *,
        engine: Optional[BaseRenderEngine] = None,
        executor: Optional[RenderExecutor] = None,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.width = int(width)
        self.height = int(height)

        self._config = config or DEFAULT_CONFIG
        validate_config(self._config)

        self.engine = engine or FullFrameEngine()
        self.executor = executor or RenderExecutor(telemetry=telemetry)
        self.log = telemetry or (lambda *_: None)

        self._lock = threading.Lock()
        self._field = build_field(self.width, self.height, self._config.window)
        self._field_key = self._config.field_key()
        self._buffer: Optional[np.ndarray] = None
        self._render_seq = 0

    # ----------------------------
    # Read-only state
    # ----------------------------

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def field(self) -> np.ndarray:
        return self._field

    @property
    def buffer(self) -> Optional[np.ndarray]:
        return self._buffer

    @property
    def render_seq(self) -> int:
        return self._render_seq

    # ----------------------------
    # Mutators
    # ----------------------------

    def set_engine(self, engine: BaseRenderEngine) -> None:
        """Swap rendering strategy."""
        with self._lock:
            self.engine = engine

    def apply_update(self, patch: Mapping[str, Any]) -> RenderConfig:
        """
        Merge a config patch (or reset to defaults) and rebuild the sampled
        field only if the plane window or the variant kind changed.
        On a validation error nothing is modified.
        """
        with self._lock:
            new_config = apply_patch(self._config, patch)
            key = new_config.field_key()
            if key != self._field_key:
                logger.debug("Rebuilding %dx%d field for %s", self.width, self.height, key)
                self._field = build_field(self.width, self.height, new_config.window)
                self._field_key = key
            self._config = new_config
            return new_config

    # ----------------------------
    # Render entry point
    # ----------------------------

    def render(self, cancel: Optional[CancelToken] = None) -> np.ndarray:
        """
        Full recomputation over the current field. Returns a fresh
        (height, width, 4) buffer; repeated calls without an update are identical.
        """
        with self._lock:
            t0 = time.perf_counter()
            buffer = self.engine.render(self.executor, self._field, self._config, cancel=cancel)
            self._buffer = buffer
            self._render_seq += 1
            seq = self._render_seq
            elapsed = time.perf_counter() - t0
        logger.info("Rendered %dx%d frame #%d in %.3fs", self.width, self.height, seq, elapsed)
        self.log(f"Render time: {round(elapsed, 3)}s")
        return buffer

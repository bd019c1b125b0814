from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class FrameEvent:
    """
    A finished frame. `data` is the (height, width, 4) float64 buffer holding
    hue [0, 360], saturation [0, 100], brightness [0, 100] and alpha (250)
    for every pixel, row-major. `seq` counts completed renders from 1.
    """
    data: np.ndarray
    width: int
    height: int
    seq: int


@dataclass(frozen=True)
class TileEvent:
    """
    One finished tile of a tiled render in progress.

    (x, y) is the tile's top-left pixel and `data` its (h, w, 4) HSB+alpha
    slice of the frame being built. `seq` is the number the frame will carry
    once it completes.
    """
    x: int
    y: int
    w: int
    h: int
    data: np.ndarray
    seq: int
    frame_w: int
    frame_h: int


@dataclass(frozen=True)
class LogEvent:
    """Render timing or a rejected update; level is None or "error"."""
    message: str
    level: Optional[str] = None

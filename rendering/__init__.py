from .core import FractalRenderer
from .executor import RenderExecutor, CancelToken, RenderCancelled
from .events import FrameEvent, TileEvent, LogEvent

__all__ = [
    "CancelToken",
    "FractalRenderer",
    "FrameEvent",
    "LogEvent",
    "RenderCancelled",
    "RenderExecutor",
    "TileEvent",
]

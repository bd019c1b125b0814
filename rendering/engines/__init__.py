from .base import BaseRenderEngine
from .full_frame import FullFrameEngine
from .tile import TileEngine

__all__ = ["BaseRenderEngine", "FullFrameEngine", "TileEngine"]

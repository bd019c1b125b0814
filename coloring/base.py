from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from fractals.base import FieldResult, RenderConfig

# Alpha written into every pixel of a rendered buffer.
ALPHA = 250.0


class ColoringError(ValueError):
    """Raised when color values cannot be mapped onto the pixel buffer."""


class ColoringStrategy(ABC):
    @abstractmethod
    def apply(self, result: FieldResult, config: RenderConfig,
              out: Optional[np.ndarray] = None, *, parallel: bool = True) -> np.ndarray:
        """
        Map evaluator output to an (H, W, 4) hue/saturation/brightness/alpha buffer.
        If `out` is given it must have exactly that shape and is filled in place.
        """
        ...

# Kernel sources package
from .cpu.escape_time import (escape_iter, escape_iter_nogil,
                              continuous_value, continuous_value_nogil)

__all__ = [
    "escape_iter",
    "escape_iter_nogil",
    "continuous_value",
    "continuous_value_nogil",
]
__version__ = "0.3.0"

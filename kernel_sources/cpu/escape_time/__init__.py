from kernel_sources.cpu.escape_time.iter import escape_iter, escape_iter_nogil
from kernel_sources.cpu.escape_time.smooth import (continuous_value,
                                                   continuous_value_nogil,
                                                   continuous_value_at)

__all__ = [
    "escape_iter",
    "escape_iter_nogil",
    "continuous_value",
    "continuous_value_nogil",
    "continuous_value_at",
]

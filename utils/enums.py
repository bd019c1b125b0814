from enum import Enum, auto


class VariantKind(Enum):
    STANDARD = auto()
    PARAMETERIZED = auto()


class EngineMode(Enum):
    FULL_FRAME = auto()
    TILED = auto()

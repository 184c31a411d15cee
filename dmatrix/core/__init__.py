"""Core utilities package"""

from .config import get_settings, Settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    MatrixError,
    ShapeError,
    ArithmeticShapeError,
    MatrixIndexError,
    FormatError,
    MatrixIOError,
    ParseError,
    InvalidOperandError,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "MatrixError",
    "ShapeError",
    "ArithmeticShapeError",
    "MatrixIndexError",
    "FormatError",
    "MatrixIOError",
    "ParseError",
    "InvalidOperandError",
]

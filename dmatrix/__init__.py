"""
dmatrix - dense matrices of double-precision values

- Validated, copy-on-construct Matrix type
- Elementwise and matrix-product arithmetic, allocating and in place
- Row/column swaps, transpose, horizontal/vertical concatenation
- Plain-text (de)serialization with a configurable delimiter
"""

from .codec import (
    format_matrix,
    parse_matrix,
    read_from_file,
    write_to_file,
)
from .core.errors import (
    ArithmeticShapeError,
    FormatError,
    InvalidOperandError,
    MatrixError,
    MatrixIndexError,
    MatrixIOError,
    ParseError,
    ShapeError,
)
from .matrix import Matrix

__version__ = "1.0.0"

__all__ = [
    "Matrix",
    "format_matrix",
    "parse_matrix",
    "read_from_file",
    "write_to_file",
    "MatrixError",
    "ShapeError",
    "ArithmeticShapeError",
    "MatrixIndexError",
    "FormatError",
    "MatrixIOError",
    "ParseError",
    "InvalidOperandError",
]

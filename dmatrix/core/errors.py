"""
Matrix exceptions.

Every error raised by dmatrix derives from MatrixError and also from the
closest builtin exception, so callers may catch either.
"""

from typing import Any, Dict, Optional


class MatrixError(Exception):
    """Base exception for dmatrix errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ShapeError(MatrixError, ValueError):
    """Raised when a source cannot be interpreted as a rectangular matrix"""


class ArithmeticShapeError(ShapeError, ArithmeticError):
    """Raised when operand shapes are incompatible for an operation"""

    def __init__(
        self,
        operation: str,
        left: tuple[int, int],
        right: tuple[int, int],
        message: Optional[str] = None,
    ):
        super().__init__(
            message=message or f"Cannot {operation} matrices of shape {left} and {right}",
            details={"operation": operation, "left": left, "right": right},
        )


class MatrixIndexError(MatrixError, IndexError):
    """Raised when an element, row or column index is out of range"""

    def __init__(self, axis: str, index: Any, bound: int):
        super().__init__(
            message=f"{axis.capitalize()} index {index!r} out of range [0, {bound})",
            details={"axis": axis, "index": index, "bound": bound},
        )


class FormatError(MatrixError, ValueError):
    """Raised when a delimiter cannot be used for the text format"""

    def __init__(self, delimiter: str, token: Optional[str] = None):
        if token is None:
            message = f"Invalid delimiter: {delimiter!r}"
            details = {"delimiter": delimiter}
        else:
            message = f"Delimiter {delimiter!r} collides with rendered value {token!r}"
            details = {"delimiter": delimiter, "token": token}
        super().__init__(message=message, details=details)


class MatrixIOError(MatrixError, OSError):
    """Raised when reading or writing a matrix file fails"""


class ParseError(MatrixIOError):
    """Raised when a matrix file contains a token that is not a number"""

    def __init__(self, path: str, line_number: int, line: str):
        self.path = path
        self.line_number = line_number
        self.line = line
        super().__init__(
            message=f"{path}:{line_number}: {line}",
            details={"path": path, "line_number": line_number, "line": line},
        )


class InvalidOperandError(MatrixError, TypeError):
    """Raised when an operation that needs a Matrix receives something else"""

    def __init__(self, operation: str, operand: Any):
        super().__init__(
            message=f"{operation} requires a Matrix operand, got {type(operand).__name__}",
            details={"operation": operation, "operand_type": type(operand).__name__},
        )

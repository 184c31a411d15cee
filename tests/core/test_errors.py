"""Tests for the dmatrix exception hierarchy."""

import pytest

from dmatrix import (
    ArithmeticShapeError,
    FormatError,
    InvalidOperandError,
    MatrixError,
    MatrixIndexError,
    MatrixIOError,
    ParseError,
    ShapeError,
)


class TestErrorHierarchy:
    """Test each error is a MatrixError and its closest builtin."""

    @pytest.mark.parametrize(
        "error, builtins",
        [
            (ShapeError("bad"), (ValueError,)),
            (ArithmeticShapeError("add", (1, 2), (2, 1)), (ShapeError, ValueError, ArithmeticError)),
            (MatrixIndexError("row", 5, 3), (IndexError,)),
            (FormatError("7"), (ValueError,)),
            (MatrixIOError("disk full"), (OSError,)),
            (ParseError("m.dat", 3, "1 x"), (MatrixIOError, OSError)),
            (InvalidOperandError("plus", None), (TypeError,)),
        ],
    )
    def test_error_bases(self, error, builtins):
        """Test isinstance relationships."""
        assert isinstance(error, MatrixError)
        for builtin in builtins:
            assert isinstance(error, builtin)

    def test_message_and_details(self):
        """Test base error stores message and details."""
        error = MatrixError("oops", details={"row": 1})
        assert error.message == "oops"
        assert error.details == {"row": 1}
        assert str(error) == "oops"
        assert MatrixError("plain").details == {}

    def test_arithmetic_shape_error_mentions_both_shapes(self):
        """Test the default message names the operation and both shapes."""
        error = ArithmeticShapeError("add", (1, 3), (3, 3))
        assert str(error) == "Cannot add matrices of shape (1, 3) and (3, 3)"

    def test_index_error_message(self):
        """Test index errors describe the valid range."""
        assert str(MatrixIndexError("row", -1, 4)) == "Row index -1 out of range [0, 4)"

    def test_parse_error_fields(self):
        """Test parse errors carry file, line number and text."""
        error = ParseError("m.dat", 3, "1 x")
        assert (error.path, error.line_number, error.line) == ("m.dat", 3, "1 x")
        assert str(error) == "m.dat:3: 1 x"

    def test_invalid_operand_message(self):
        """Test the operand type is named."""
        assert "NoneType" in str(InvalidOperandError("plus", None))

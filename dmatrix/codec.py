"""
Text codec for matrices.

The on-disk format is plain text with one matrix row per line and values
separated by a delimiter. There is no header; the shape is inferred from the
number of lines and the number of tokens on each line.

Example (delimiter ","):

    1.0,2.0,3.0
    4.0,5.0,6.0
"""

from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING, Iterable, Sequence

from .core.errors import FormatError, MatrixIOError, ParseError, ShapeError
from .core.logging import get_context_logger, get_logger

if TYPE_CHECKING:
    from .matrix import Matrix

logger = get_logger(__name__)

# Characters that would collide with numeric tokens
_FORBIDDEN_DELIMITER_CHARS = re.compile(r"[.\d]")


def is_valid_delimiter(delimiter: str) -> bool:
    """Check that a delimiter is non-empty and contains no digit or '.'."""
    return bool(delimiter) and _FORBIDDEN_DELIMITER_CHARS.search(delimiter) is None


def validate_delimiter(delimiter: str | None) -> str:
    """
    Resolve and validate a delimiter.

    Args:
        delimiter: Delimiter to use, or None for the configured default

    Returns:
        The delimiter to use

    Raises:
        FormatError: If the delimiter is empty or contains a digit or '.'
    """
    if delimiter is None:
        from .core.config import get_settings

        delimiter = get_settings().DEFAULT_DELIMITER

    if not isinstance(delimiter, str) or not is_valid_delimiter(delimiter):
        raise FormatError(delimiter)
    return delimiter


def format_value(value: float) -> str:
    """Render a double so that it parses back to the identical value."""
    return repr(float(value))


def format_rows(rows: Iterable[Sequence[float]], delimiter: str | None = None) -> str:
    """
    Render rows of numbers as delimited text.

    Lines are joined by a single newline with no trailing newline.

    Raises:
        FormatError: If the delimiter is unusable, or a rendered value contains
            a delimiter character (such as "-" or "e") and would not read back
    """
    delimiter = validate_delimiter(delimiter)
    separators = set(delimiter)
    lines = []
    for row in rows:
        tokens = [format_value(value) for value in row]
        for token in tokens:
            if separators.intersection(token):
                raise FormatError(delimiter, token)
        lines.append(delimiter.join(tokens))
    return "\n".join(lines)


def format_matrix(matrix: Matrix, delimiter: str | None = None) -> str:
    """Render a matrix as delimited text."""
    return format_rows(matrix.entries, delimiter)


def tokenize_line(line: str, delimiter: str) -> list[str]:
    """
    Split a line into tokens.

    Every character of the delimiter is a separator and runs of separators
    collapse, so ", " splits "1.0, 2.0,3.0" into three tokens.
    """
    separators = "[" + "".join(re.escape(char) for char in set(delimiter)) + "]+"
    return [token for token in re.split(separators, line) if token]


def parse_rows(lines: Iterable[str], delimiter: str | None = None, source: str = "<string>") -> list[list[float]]:
    """
    Parse delimited lines into rows of floats.

    Blank lines are skipped. Row lengths are not checked here.

    Args:
        lines: Lines of text (trailing newlines allowed)
        delimiter: Delimiter, or None for the configured default
        source: Name reported in parse errors

    Raises:
        FormatError: If the delimiter is unusable
        ParseError: If a token is not a number
    """
    delimiter = validate_delimiter(delimiter)
    rows: list[list[float]] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        tokens = tokenize_line(line, delimiter)
        if not tokens:
            continue
        try:
            rows.append([float(token) for token in tokens])
        except ValueError as exc:
            logger.debug(
                "Unparsable matrix line",
                extra={"extra_data": {"source": source, "line_number": line_number}},
            )
            raise ParseError(source, line_number, line) from exc

    return rows


def parse_matrix(text: str, delimiter: str | None = None) -> Matrix:
    """
    Parse delimited text into a Matrix.

    Raises:
        FormatError: If the delimiter is unusable
        ParseError: If a token is not a number
        ShapeError: If there are no rows or the rows differ in length
    """
    return _build_matrix(parse_rows(text.splitlines(), delimiter), "<string>")


def write_to_file(matrix: Matrix, path: str | os.PathLike, delimiter: str | None = None) -> None:
    """
    Write a matrix to a file, creating or truncating it.

    Raises:
        FormatError: If the delimiter is unusable or collides with a rendered
            value (nothing is written)
        MatrixIOError: If the file cannot be written
    """
    from .core.config import get_settings

    source = os.fspath(path)
    file_logger = get_context_logger(__name__, path=source)
    text = format_matrix(matrix, delimiter)
    try:
        with open(path, "w", encoding=get_settings().FILE_ENCODING, newline="\n") as handle:
            handle.write(text)
    except OSError as exc:
        raise MatrixIOError(
            f"Failed to write matrix to {source}: {exc}",
            details={"path": source},
        ) from exc

    file_logger.debug("Matrix written", extra_data={"shape": matrix.shape})


def read_from_file(path: str | os.PathLike, delimiter: str | None = None) -> Matrix:
    """
    Read a matrix from a file written by write_to_file.

    The whole file is parsed before the matrix is built, so a failure never
    yields a partial matrix.

    Raises:
        FormatError: If the delimiter is unusable
        ParseError: If a token is not a number
        ShapeError: If the file has no rows or the rows differ in length
        MatrixIOError: If the file cannot be read
    """
    from .core.config import get_settings

    source = os.fspath(path)
    file_logger = get_context_logger(__name__, path=source)
    delimiter = validate_delimiter(delimiter)
    try:
        with open(path, "r", encoding=get_settings().FILE_ENCODING) as handle:
            rows = parse_rows(handle, delimiter, source=source)
    except ParseError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise MatrixIOError(
            f"Failed to read matrix from {source}: {exc}",
            details={"path": source},
        ) from exc

    matrix = _build_matrix(rows, source)
    file_logger.debug("Matrix read", extra_data={"shape": matrix.shape})
    return matrix


def _build_matrix(rows: list[list[float]], source: str) -> Matrix:
    from .matrix import Matrix

    if not rows:
        raise ShapeError(f"No matrix rows found in {source}", details={"source": source})
    return Matrix(rows)

"""
Shared pytest fixtures for the dmatrix test suite.

This module provides:
- Sample matrices used by the law/property tests
- A helper for writing raw matrix files
- Isolation of cached settings between tests
"""

from pathlib import Path
from typing import Callable

import pytest

from dmatrix import Matrix
from dmatrix.core.config import get_settings


SAMPLE_ROWS = {
    "square_3x3": [[0, 1, 2], [3, 4, 5], [6, 7, 8]],
    "row_1x3": [[1, 2, 3]],
    "column_4x1": [[0], [0.5], [-1.25], [8]],
    "rect_2x3": [[1.5, -2, 0], [3, 4.25, -6]],
    "rect_3x2": [[-1, 2], [0.1, 0.2], [1e10, -3e-5]],
    "single_1x1": [[42]],
}


@pytest.fixture(autouse=True)
def _isolate_settings():
    """Drop cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(params=sorted(SAMPLE_ROWS))
def sample_matrix(request) -> Matrix:
    """Each sample matrix in turn."""
    return Matrix(SAMPLE_ROWS[request.param])


@pytest.fixture
def square_matrix() -> Matrix:
    """The 3x3 matrix [[0, 1, 2], [3, 4, 5], [6, 7, 8]]."""
    return Matrix(SAMPLE_ROWS["square_3x3"])


@pytest.fixture
def write_text(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing raw text into a file under tmp_path."""
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write

"""Tests for dmatrix settings."""

import pytest
from pydantic import ValidationError

from dmatrix import Matrix, parse_matrix
from dmatrix.core.config import Settings, get_settings


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in ("DEFAULT_DELIMITER", "FILE_ENCODING", "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE"):
            monkeypatch.delenv(f"DMATRIX_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_DELIMITER == " "
        assert settings.FILE_ENCODING == "utf-8"
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FORMAT == "text"
        assert settings.LOG_FILE is None

    def test_get_settings_is_cached(self):
        """Test get_settings returns one shared instance."""
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        """Test DMATRIX_ variables override defaults."""
        monkeypatch.setenv("DMATRIX_LOG_LEVEL", "DEBUG")
        assert Settings(_env_file=None).LOG_LEVEL == "DEBUG"

    def test_default_delimiter_drives_codec(self, monkeypatch):
        """Test the configured delimiter is used when none is given."""
        monkeypatch.setenv("DMATRIX_DEFAULT_DELIMITER", ";")
        get_settings.cache_clear()
        matrix = Matrix([[1, 2], [3, 4]])
        assert matrix.to_string() == "1.0;2.0\n3.0;4.0"
        assert parse_matrix("1;2\n3;4") == matrix
        assert matrix.to_string(" ") == "1.0 2.0\n3.0 4.0"

    @pytest.mark.parametrize("delimiter", ["7", "."])
    def test_invalid_default_delimiter(self, monkeypatch, delimiter):
        """Test unusable delimiters are rejected when settings load."""
        monkeypatch.setenv("DMATRIX_DEFAULT_DELIMITER", delimiter)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_log_format(self, monkeypatch):
        """Test LOG_FORMAT accepts only json or text."""
        monkeypatch.setenv("DMATRIX_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

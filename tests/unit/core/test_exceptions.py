"""
Tests for the exception hierarchy.

Organization
------------
- TestBaseException: ChunkForgeError
- TestConfigurationExceptions: ConfigurationError, LanguageConfigError
- TestCancellationExceptions: CancelledError, DeadlineExceededError
- TestParseExceptions: ParseFatalError, UnsupportedLanguageError
"""

import pytest

from chunkforge.core.exceptions import (
    CancellationError,
    CancelledError,
    ChunkForgeError,
    ConfigurationError,
    DeadlineExceededError,
    LanguageConfigError,
    ParseFatalError,
    UnsupportedLanguageError,
)


class TestBaseException:
    """Tests for ChunkForgeError."""

    def test_message(self):
        error = ChunkForgeError("test error")

        assert str(error) == "test error"
        assert error.user_message == "test error"

    def test_default_help_fields(self):
        error = ChunkForgeError("boom")

        assert error.error_code == "CF-ERR-000"
        assert error.why_it_happened
        assert error.how_to_fix

    def test_override_help_fields(self):
        error = ChunkForgeError(
            "boom",
            error_code="CF-X-1",
            why_it_happened="because",
            how_to_fix=["do this"],
        )

        assert error.error_code == "CF-X-1"
        assert error.why_it_happened == "because"
        assert error.how_to_fix == ["do this"]

    def test_override_does_not_leak_to_class(self):
        ChunkForgeError("boom", error_code="CF-X-1")

        assert ChunkForgeError("other").error_code == "CF-ERR-000"


class TestConfigurationExceptions:
    def test_configuration_error_code(self):
        assert ConfigurationError("x").error_code == "CF-CFG-001"

    def test_language_config_error_carries_path(self):
        error = LanguageConfigError("bad table", path="languages/go.yaml")

        assert error.path == "languages/go.yaml"
        assert error.error_code == "CF-CFG-002"

    def test_language_config_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            raise LanguageConfigError("bad table")


class TestCancellationExceptions:
    def test_cancelled_and_expired_are_distinct(self):
        assert not issubclass(CancelledError, DeadlineExceededError)
        assert not issubclass(DeadlineExceededError, CancelledError)

    def test_both_share_base(self):
        assert issubclass(CancelledError, CancellationError)
        assert issubclass(DeadlineExceededError, CancellationError)
        assert issubclass(CancellationError, ChunkForgeError)

    def test_deadline_carries_timeout(self):
        error = DeadlineExceededError("late", timeout=1.5)

        assert error.timeout == 1.5
        assert error.error_code == "CF-CAN-002"


class TestParseExceptions:
    def test_parse_fatal_not_unsupported_by_default(self):
        error = ParseFatalError("no tree", language="python")

        assert error.language == "python"
        assert error.unsupported is False
        assert error.error_code == "CF-PARSE-001"

    def test_unsupported_language_flag(self):
        error = UnsupportedLanguageError("unknown grammar", language="cobol")

        assert error.unsupported is True
        assert error.language == "cobol"
        assert error.error_code == "CF-PARSE-002"

    def test_unsupported_is_parse_fatal(self):
        with pytest.raises(ParseFatalError):
            raise UnsupportedLanguageError("unknown grammar")

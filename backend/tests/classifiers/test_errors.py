"""Tests for error classification."""
import pytest

from waste_tracker.classifiers.errors import (
    AccessForbidden,
    ConfigurationError,
    GenericAnalysisFailure,
    InvalidCredential,
    InvalidRequest,
    ModelUnavailable,
    QuotaExceeded,
    ResponseFormatError,
    SourceImageNotFound,
    classify_error,
)


class TestClassifyError:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("API_KEY_INVALID: key not valid", InvalidCredential),
            ("Resource has been exhausted (check quota)", QuotaExceeded),
            ("429 Too Many Requests", QuotaExceeded),
            ("403 Forbidden", AccessForbidden),
            ("PERMISSION_DENIED on project", AccessForbidden),
            ("400 Bad Request", InvalidRequest),
            ("INVALID_ARGUMENT: image too large", InvalidRequest),
            ("ENOENT: no such file", SourceImageNotFound),
        ],
    )
    def test_substring_rules(self, message, expected):
        assert isinstance(classify_error(RuntimeError(message)), expected)

    def test_configuration_error_is_returned_verbatim(self):
        error = ConfigurationError("GEMINI_API_KEY is not set in your .env file. Please add it.")
        assert classify_error(error) is error

    def test_file_not_found_error(self):
        error = FileNotFoundError(2, "No such file or directory", "/uploads/1400-429-plate.jpg")
        assert isinstance(classify_error(error), SourceImageNotFound)

    def test_unmatched_error_is_generic_with_message(self):
        classified = classify_error(RuntimeError("connection reset"))
        assert isinstance(classified, GenericAnalysisFailure)
        assert str(classified) == "AI analysis failed: connection reset"

    def test_aggregate_with_quota_message_becomes_quota(self):
        error = ModelUnavailable(["gemini-pro"], RuntimeError("429 quota exceeded"))
        assert isinstance(classify_error(error), QuotaExceeded)

    def test_aggregate_without_match_keeps_its_kind(self):
        error = ModelUnavailable(["a", "b"], RuntimeError("boom"))
        assert classify_error(error) is error

    def test_format_error_keeps_its_kind(self):
        error = ResponseFormatError("Failed to parse AI response.", raw_text="hello")
        assert classify_error(error) is error

    def test_first_rule_wins(self):
        # API_KEY outranks the 400 status
        classified = classify_error(RuntimeError("400 API_KEY_INVALID"))
        assert isinstance(classified, InvalidCredential)


class TestModelUnavailable:
    def test_message_names_candidates_in_order_and_last_error(self):
        error = ModelUnavailable(["first", "second", "third"], RuntimeError("final failure"))
        message = str(error)
        assert "first, second, third" in message
        assert "final failure" in message
        assert error.attempted == ["first", "second", "third"]

    def test_without_last_error(self):
        error = ModelUnavailable([], None)
        assert "Unknown error" in str(error)


class TestErrorCodes:
    def test_each_kind_has_distinct_code(self):
        kinds = [
            ConfigurationError,
            InvalidCredential,
            QuotaExceeded,
            AccessForbidden,
            InvalidRequest,
            SourceImageNotFound,
            GenericAnalysisFailure,
        ]
        codes = {kind.code for kind in kinds}
        assert len(codes) == len(kinds)

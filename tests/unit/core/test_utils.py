"""Tests for shared helpers and the error taxonomy."""
import pytest

from core.exceptions import (
    NotFoundError, ProviderError, RequirementValidationError, is_skippable
)
from core.utils import normalize_description, round_half_up, similarity_from_raw_score


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [
        (72.5, 73), (72.4999, 72), (0.5, 1), (0.0, 0), (99.5, 100), (100.0, 100),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestSimilarityFromRawScore:

    def test_default_offset(self):
        assert similarity_from_raw_score(1.75) == pytest.approx(0.75)
        assert similarity_from_raw_score(0.0) == pytest.approx(-1.0)

    def test_custom_offset(self):
        assert similarity_from_raw_score(0.4, offset=0.0) == pytest.approx(0.4)

    def test_out_of_range_clipped(self):
        assert similarity_from_raw_score(2.5) == 1.0
        assert similarity_from_raw_score(-0.5) == -1.0


class TestNormalizeDescription:

    def test_trim_and_casefold(self):
        assert normalize_description("  React Experience ") == "react experience"
        assert normalize_description("STRASSE") == normalize_description("straße")

    def test_none(self):
        assert normalize_description(None) == ""


class TestExceptions:

    def test_not_found_message(self):
        error = NotFoundError("Candidate", "c-1")
        assert str(error) == "Candidate c-1 not found"
        assert error.identifier == "c-1"

    def test_validation_error_carries_reason(self):
        error = RequirementValidationError("r-1", "weight out of range")
        assert error.reason == "weight out of range"
        assert "r-1" in str(error)

    def test_skippable_errors(self):
        assert is_skippable(ProviderError("down"))
        assert is_skippable(NotFoundError("Candidate", "x"))
        assert not is_skippable(RequirementValidationError("r", "bad"))
        assert not is_skippable(RuntimeError("bug"))

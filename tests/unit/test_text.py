"""
Unit tests for typed-answer matching.
"""

import pytest

from korean_drill.core.text import answers_match, normalize_answer


class TestNormalize:
    def test_trims_and_collapses(self):
        assert normalize_answer("  제가   학생이에요.  ") == "제가 학생이에요"

    def test_lowercases(self):
        assert normalize_answer("Thank You!") == "thank you"


class TestAnswersMatch:
    @pytest.mark.parametrize(
        "given,expected",
        [
            ("제가 학생이에요", "제가 학생이에요."),
            ("rice", "rice / meal"),
            ("meal", "rice / meal"),
            ("hi", "hello, hi"),
        ],
    )
    def test_matches(self, given, expected):
        assert answers_match(given, expected)

    @pytest.mark.parametrize(
        "given,expected",
        [
            ("", "물"),
            ("   ", "물"),
            ("저가 학생이에요", "제가 학생이에요"),
            ("rice meal", "rice / meal"),
        ],
    )
    def test_mismatches(self, given, expected):
        assert not answers_match(given, expected)

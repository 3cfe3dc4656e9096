#!/usr/bin/env python3
"""Test Levenshtein distance and normalized string similarity."""
import pytest

from core.matcher.string_similarity import levenshtein_distance, similarity


class TestLevenshteinDistance:

    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("python", "python", 0),
    ])
    def test_distance(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_symmetric(self):
        assert levenshtein_distance("kubernetes", "kubernets") == levenshtein_distance("kubernets", "kubernetes")


class TestSimilarity:

    @pytest.mark.parametrize("text", ["a", "python", "JavaScript", "x" * 40])
    def test_identical_strings_score_one(self, text):
        assert similarity(text, text) == 1.0

    def test_both_empty_scores_one(self):
        assert similarity("", "") == 1.0

    def test_one_empty_scores_zero(self):
        assert similarity("abc", "") == 0.0

    def test_normalized_by_longer_string(self):
        # one deletion over 10 characters
        assert similarity("kubernetes", "kubernets") == pytest.approx(0.9)

    def test_unrelated_words_score_low(self):
        assert similarity("java", "python") < 0.8

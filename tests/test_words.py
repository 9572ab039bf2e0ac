"""
Tests for words.py - word scoring and both detection modes.
"""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from grid import SNAKE, Cell
from words import (
    ScoredWord,
    WordReport,
    find_all_valid_words,
    find_longest_valid_word,
    load_dictionary,
    score_word,
    word_from_segments,
)


def segments_for(letters):
    """Snake segments in reading order laid along row 0."""
    return [Cell(SNAKE, x, 0, letter) for x, letter in enumerate(letters)]


class TestScoreWord:
    @pytest.mark.parametrize(
        "length,expected",
        [(1, 1), (2, 1), (3, 2), (4, 3), (5, 6), (6, 10), (7, 15), (8, 17), (10, 21)],
    )
    def test_literal_values(self, length, expected):
        assert score_word(length) == expected

    def test_monotonic(self):
        for n in range(1, 40):
            assert score_word(n + 1) >= score_word(n)


class TestFindAllValidWords:
    def test_two_letter_words_are_never_scored(self):
        report = find_all_valid_words(segments_for("CAT"), {"cat", "at"})
        assert [w.word for w in report.words] == ["cat"]
        assert report.words[0].score == 2
        assert report.words[0].coordinates == [(0, 0), (1, 0), (2, 0)]
        assert report.total_score == 2
        assert report.total_letters == 3

    def test_overlapping_matches_all_count(self):
        report = find_all_valid_words(segments_for("CATS"), {"cat", "cats", "ats"})
        assert [w.word for w in report.words] == ["cat", "cats", "ats"]
        assert report.total_score == 2 + 3 + 2
        assert report.total_letters == 10

    def test_repeated_word_counts_twice(self):
        report = find_all_valid_words(segments_for("DOGDOG"), {"dog"})
        assert [w.word for w in report.words] == ["dog", "dog"]
        assert report.words[1].coordinates == [(3, 0), (4, 0), (5, 0)]
        assert report.total_score == 4

    def test_missing_dictionary_finds_nothing(self):
        report = find_all_valid_words(segments_for("CAT"), None)
        assert report == WordReport()

    def test_short_snake(self):
        assert find_all_valid_words(segments_for("A"), {"a"}).words == []

    def test_report_to_dict(self):
        report = find_all_valid_words(segments_for("CAT"), {"cat"})
        assert report.to_dict() == {
            "words": [{"word": "cat", "coordinates": [[0, 0], [1, 0], [2, 0]], "score": 2}],
            "total_score": 2,
            "total_letters": 3,
        }


class TestFindLongestValidWord:
    def test_prefers_longest_match_at_end(self):
        result = find_longest_valid_word(segments_for("TIED"), {"die", "tied"})
        assert result.word == "tied"
        assert result.coordinates == [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert result.score == 3

    def test_finds_inner_word(self):
        result = find_longest_valid_word(segments_for("XCATX"), {"cat", "at"})
        assert result.word == "cat"
        assert result.coordinates == [(1, 0), (2, 0), (3, 0)]

    def test_equal_length_prefers_later_end(self):
        result = find_longest_valid_word(segments_for("CATDOG"), {"cat", "dog"})
        assert result.word == "dog"

    def test_no_match_returns_none(self):
        assert find_longest_valid_word(segments_for("XYZ"), {"cat"}) is None

    def test_missing_dictionary(self):
        assert find_longest_valid_word(segments_for("CAT"), None) is None


def test_word_from_segments_lowercases():
    assert word_from_segments(segments_for("HeLLo")) == "hello"


def test_scored_word_to_dict():
    word = ScoredWord("hi", [(1, 2), (2, 2)], 1)
    assert word.to_dict() == {"word": "hi", "coordinates": [[1, 2], [2, 2]], "score": 1}


def test_load_dictionary(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("Cat\n  dog \n\nTIED\n", encoding="utf-8")
    assert load_dictionary(str(path)) == frozenset({"cat", "dog", "tied"})


def test_load_dictionary_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dictionary(str(tmp_path / "nope.txt"))

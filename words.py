# Word detection and scoring over the letters carried by the snake body.
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Collection, Sequence

try:
    from .grid import Cell
except ImportError:
    from grid import Cell


# Shorter substrings are never checked against the dictionary.
MIN_WORD_LENGTH = 3

SCORING_ALL = "all"
SCORING_LONGEST = "longest"
SCORING_MODES = (SCORING_ALL, SCORING_LONGEST)

Dictionary = Collection[str]


@dataclass
class ScoredWord:
    word: str
    coordinates: list[tuple[int, int]]
    score: int

    def to_dict(self) -> dict:
        return {
            "word": self.word,
            "coordinates": [list(xy) for xy in self.coordinates],
            "score": self.score,
        }


@dataclass
class WordReport:
    """All words found in one evaluation, plus running totals."""
    words: list[ScoredWord] = field(default_factory=list)
    total_score: int = 0
    total_letters: int = 0

    def to_dict(self) -> dict:
        return {
            "words": [word.to_dict() for word in self.words],
            "total_score": self.total_score,
            "total_letters": self.total_letters,
        }


def score_word(length: int) -> int:
    """
    Points for a word of the given length:
    - under 3 letters: 1
    - 3: 2, 4: 3, 5: 6, 6: 10
    - 7+: 15, plus 2 for each letter past 7
    """
    if length < 3:
        return 1
    if length == 3:
        return 2
    if length == 4:
        return 3
    if length == 5:
        return 6
    if length == 6:
        return 10
    return 15 + 2 * (length - 7)


def word_from_segments(segments: Sequence[Cell]) -> str:
    return "".join(segment.letter or "" for segment in segments).lower()


def find_all_valid_words(segments: Sequence[Cell], dictionary: Dictionary | None) -> WordReport:
    """Score every dictionary substring of the segment letters.

    `segments` should be in reading order (tail to head). Overlapping and
    repeated matches all count toward the totals.
    """
    report = WordReport()
    if dictionary is None:
        return report

    letters = word_from_segments(segments)
    for start in range(len(letters)):
        for end in range(start + MIN_WORD_LENGTH, len(letters) + 1):
            candidate = letters[start:end]
            if candidate not in dictionary:
                continue
            points = score_word(len(candidate))
            report.words.append(
                ScoredWord(
                    word=candidate,
                    coordinates=[segment.coordinates for segment in segments[start:end]],
                    score=points,
                )
            )
            report.total_score += points
            report.total_letters += len(candidate)

    return report


def find_longest_valid_word(segments: Sequence[Cell], dictionary: Dictionary | None) -> ScoredWord | None:
    """Longest dictionary substring, preferring later end positions, then earlier starts."""
    if dictionary is None:
        return None

    letters = word_from_segments(segments)
    best: tuple[int, int] | None = None
    for end in range(len(letters), 0, -1):
        for start in range(end):
            length = end - start
            if best is not None and length <= best[1] - best[0]:
                continue
            if letters[start:end] in dictionary:
                best = (start, end)

    if best is None:
        return None
    start, end = best
    return ScoredWord(
        word=letters[start:end],
        coordinates=[segment.coordinates for segment in segments[start:end]],
        score=score_word(end - start),
    )


def load_dictionary(path: str) -> frozenset[str]:
    """Read a newline-delimited word list into a lowercase set."""
    with open(path, "r", encoding="utf-8") as handle:
        return frozenset(line.strip().lower() for line in handle if line.strip())

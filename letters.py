# Letter frequency table and weighted sampling for spawning board letters.
from __future__ import annotations

from typing import Iterable

import numpy as np


# Approximate English letter frequencies (percent).
LETTER_WEIGHTS: dict[str, float] = {
    "A": 8.17,
    "B": 1.49,
    "C": 2.78,
    "D": 4.25,
    "E": 12.7,
    "F": 2.23,
    "G": 2.02,
    "H": 6.09,
    "I": 7.0,
    "J": 0.15,
    "K": 0.77,
    "L": 4.03,
    "M": 2.41,
    "N": 6.75,
    "O": 7.51,
    "P": 1.93,
    "Q": 0.1,
    "R": 5.99,
    "S": 6.33,
    "T": 9.06,
    "U": 2.76,
    "V": 0.98,
    "W": 2.36,
    "X": 0.15,
    "Y": 1.97,
    "Z": 0.07,
}
FALLBACK_LETTER = "A"
VOWELS = frozenset("AEIOUY")

_TOTAL_WEIGHT = sum(LETTER_WEIGHTS.values())


def sample_letter(rng: np.random.Generator) -> str:
    """Draw one uppercase letter, weighted by English frequency."""
    draw = rng.random() * _TOTAL_WEIGHT

    cumulative = 0.0
    for letter, weight in LETTER_WEIGHTS.items():
        cumulative += weight
        if draw < cumulative:
            return letter

    # Float rounding can leave the draw just past the last cumulative sum.
    return FALLBACK_LETTER


def is_vowel(letter: str | None) -> bool:
    if letter is None:
        return False
    return letter.upper() in VOWELS


def top_letters(letters: Iterable[str | None], count: int = 3) -> list[str]:
    """Most frequent letters, highest count first; ties keep first-seen order."""
    frequency: dict[str, int] = {}
    for letter in letters:
        if letter:
            frequency[letter] = frequency.get(letter, 0) + 1

    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return [letter for letter, _ in ranked[:count]]

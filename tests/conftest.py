# tests/conftest.py - shared fixtures

import os
import sys

# add root to import path so the package imports without installation
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from fuzzy_counter import FuzzyCounter


SENTENCES = [
    "An aardvark ate my apple.",
    "An apple is a fruit.",
    "A mango is a fruit.",
    "My favorite fruit is mango.",
    "A mango is a nutritious snack.",
    "There's a snake in my boot.",
    "There's a snail in my boot.",
    "There's a boot in my boot.",
    "My name is Talky Tina, and you'd better be nice to me.",
    "My name is Chalky Tina, and you'd better be nice to me!",
    "To infinity and beyond!",
    "To Nanaimo and beyond!",
    "You've got a friend in me.",
    # rejected
    "2024-09-08T23:30:03.333",
]

EXPECTED = {
    "An aardvark ate my apple.": 1,
    "An apple is a fruit.": 1,
    "A mango is a fruit.": 1,
    "My favorite fruit is mango.": 1,
    "A mango is a nutritious snack.": 1,
    "There's a snake in my boot.": 3,
    "My name is Talky Tina, and you'd better be nice to me.": 2,
    "To infinity and beyond!": 1,
    "To Nanaimo and beyond!": 1,
    "You've got a friend in me.": 1,
}


@pytest.fixture
def sentences():
    return list(SENTENCES)


@pytest.fixture
def expected_counts():
    return dict(EXPECTED)


@pytest.fixture
def counter():
    return (
        FuzzyCounter(step=2, score_threshold=0.70)
        .with_ignore(r"[.!]$", r"[,']")
        .with_reject(r"\d{4}")
    )

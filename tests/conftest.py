"""Shared fixtures."""

from datetime import datetime

import pytest

from vocab_drill.models.vocabulary import Category, Word


class FakeClock:
    """Callable clock whose time tests can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_words(count: int, prefix: str = "w") -> list[Word]:
    return [Word(id=f"{prefix}{i}", source=f"mot{i}", target=f"word{i}") for i in range(count)]


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def categories():
    return [
        Category(id="food", name="Food", words=make_words(3, "food")),
        Category(id="colors", name="Colors", words=make_words(4, "color")),
    ]

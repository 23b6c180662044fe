"""Static vocabulary input table."""

import json
from pathlib import Path

from pydantic import BaseModel, Field


class Word(BaseModel):
    """A source/target word pair."""

    id: str
    source: str
    target: str


class Category(BaseModel):
    """A named group of words."""

    id: str
    name: str
    words: list[Word] = Field(default_factory=list)

    @property
    def word_ids(self) -> set[str]:
        return {w.id for w in self.words}


class Vocabulary(BaseModel):
    """All categories available to the learner."""

    categories: list[Category] = Field(default_factory=list)

    def get_category(self, category_id: str) -> Category | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    @property
    def word_count(self) -> int:
        return sum(len(c.words) for c in self.categories)


def load_vocabulary(path: Path) -> Vocabulary:
    """Load a vocabulary table from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return Vocabulary.model_validate(data)

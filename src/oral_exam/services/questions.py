"""Randomized question selection for defenses."""

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from oral_exam.domain.questions import CONTENT, PROCESS, Question, QuestionSelection

logger = logging.getLogger(__name__)


class QuestionRepository(Protocol):
    """Read-only access to the question bank."""

    def list_questions(self) -> list[Question]:
        """Return every question in the bank."""


@dataclass
class QuestionSampler:
    """Draws duplicate-free question subsets per category."""

    rng: random.Random = field(default_factory=random.SystemRandom)

    def sample(
        self, bank: Iterable[Question], content_count: int, process_count: int
    ) -> QuestionSelection:
        """Shuffle each category independently and take the requested heads.

        Counts are clamped to what the category holds; labels other than
        content/process are ignored.
        """
        content, process = partition(bank)
        return QuestionSelection(
            content=self._draw(content, content_count),
            process=self._draw(process, process_count),
        )

    def _draw(self, pool: list[str], count: int) -> list[str]:
        shuffled = list(pool)
        self.rng.shuffle(shuffled)
        return shuffled[: max(count, 0)]


def partition(bank: Iterable[Question]) -> tuple[list[str], list[str]]:
    """Split the bank into unique content and process question texts."""
    buckets: dict[str, dict[str, None]] = {CONTENT: {}, PROCESS: {}}
    for question in bank:
        category = question.category.strip().lower()
        text = question.text.strip()
        if category in buckets and text:
            buckets[category][text] = None
    return list(buckets[CONTENT]), list(buckets[PROCESS])


@dataclass
class QuestionService:
    """Serves question selections from the stored bank."""

    repository: QuestionRepository
    sampler: QuestionSampler

    def draw(self, content_count: int, process_count: int) -> QuestionSelection:
        """Sample questions from the current bank."""
        bank = self.repository.list_questions()
        selection = self.sampler.sample(bank, content_count, process_count)
        logger.info(
            "Questions drawn",
            extra={
                "bank_size": len(bank),
                "content_count": len(selection.content),
                "process_count": len(selection.process),
            },
        )
        return selection

"""Models for the examination question bank."""

from dataclasses import dataclass, field

CONTENT = "content"
PROCESS = "process"


@dataclass(frozen=True)
class Question:
    """Single question with its raw category label."""

    text: str
    category: str


@dataclass(frozen=True)
class QuestionSelection:
    """Questions drawn for one defense."""

    content: list[str] = field(default_factory=list)
    process: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.content) + len(self.process)

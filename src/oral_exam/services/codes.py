"""Access code generation."""

import logging
import random
from collections.abc import Collection
from dataclasses import dataclass, field

from oral_exam.domain.errors import GenerationExhausted

CODE_MIN = 1000
CODE_MAX = 9999
DEFAULT_MAX_ATTEMPTS = 100

logger = logging.getLogger(__name__)


@dataclass
class CodeRegistry:
    """Issues 4-digit session codes that do not collide with existing ones."""

    rng: random.Random = field(default_factory=random.SystemRandom)
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def generate(self, existing_codes: Collection[str]) -> str:
        """Return a code in [1000, 9999] absent from ``existing_codes``.

        Draws uniformly and rejects collisions. Raises ``GenerationExhausted``
        once ``max_attempts`` draws have all collided.
        """
        for _ in range(self.max_attempts):
            code = str(self.rng.randint(CODE_MIN, CODE_MAX))
            if code not in existing_codes:
                return code
        logger.error(
            "Session code generation exhausted",
            extra={
                "attempts": self.max_attempts,
                "existing_codes": len(existing_codes),
            },
        )
        raise GenerationExhausted


def is_valid_code(value: str) -> bool:
    """Return true when ``value`` is a 4-digit code inside the code space."""
    return (
        len(value) == 4
        and value.isascii()
        and value.isdigit()
        and CODE_MIN <= int(value) <= CODE_MAX
    )

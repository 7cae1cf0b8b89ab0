"""OpenAI Responses API client for defense grading."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from oral_exam.services.grading import GradingClient

GRADE_FORMAT_NAME = "defense_grade"


@dataclass
class OpenAIGradingClient(GradingClient):
    """Sends a paper and its defense transcript to a model for a grade."""

    client: AsyncOpenAI
    format_name: str = GRADE_FORMAT_NAME

    @classmethod
    def create(cls, api_key: str) -> "OpenAIGradingClient":
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def grade(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Request a grade constrained to ``schema`` and return it parsed."""
        request = _grade_request(
            model=model,
            instructions=instructions,
            prompt=prompt,
            grade_format={
                "type": "json_schema",
                "name": self.format_name,
                "strict": True,
                "schema": schema,
            },
            store=store,
        )
        if reasoning_effort:
            request["reasoning"] = {"effort": reasoning_effort}
        response = await self.client.responses.create(**request)
        return _parse_grade(response.output_text)


def _grade_request(
    *,
    model: str,
    instructions: str,
    prompt: str,
    grade_format: dict[str, object],
    store: bool,
) -> dict[str, object]:
    # Rubric stays in ``instructions``; student text is the only input.
    return {
        "model": model,
        "instructions": instructions,
        "input": prompt,
        "text": {"format": grade_format},
        "store": store,
    }


def _parse_grade(output_text: str | None) -> dict[str, object]:
    if not output_text:
        raise RuntimeError("Grading model returned no output")
    try:
        payload = json.loads(output_text)
    except json.JSONDecodeError as exc:
        raise RuntimeError("Grading model returned malformed JSON") from exc
    if not isinstance(payload, dict):
        raise RuntimeError("Grading model returned a non-object grade")
    return payload

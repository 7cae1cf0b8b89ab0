"""Tests for transcript formatting and code extraction."""

from oral_exam.api.models import TranscriptWebhook
from oral_exam.services.transcripts import extract_code, format_transcript


def test_format_labels_agent_as_examiner_and_others_as_student() -> None:
    entries = [
        {"role": "agent", "message": "Hello, what is your code?"},
        {"role": "user", "message": "It is 4821."},
        {"role": "Agent", "message": "Thanks."},
        {"role": "tool", "message": None},
    ]

    text = format_transcript(entries)

    assert text == (
        "EXAMINER: Hello, what is your code?\n\n"
        "STUDENT: It is 4821.\n\n"
        "EXAMINER: Thanks.\n\n"
        "STUDENT: "
    )


def test_format_accepts_parsed_webhook_entries() -> None:
    webhook = TranscriptWebhook.model_validate(
        {
            "type": "post_call_transcription",
            "data": {
                "conversation_id": "conv-1",
                "transcript": [{"role": "user", "message": "hi"}],
            },
        }
    )

    assert format_transcript(webhook.data.transcript) == "STUDENT: hi"


def test_format_coerces_non_list_input_to_string() -> None:
    assert format_transcript("raw text 1234") == "raw text 1234"
    assert format_transcript(None) == ""
    assert format_transcript({"a": 1}) == "{'a': 1}"


def test_extract_prefers_explicit_code_statement() -> None:
    transcript = (
        "EXAMINER: Your essay cites a study from 1998. "
        "EXAMINER: please state your code. STUDENT: my code is 4821, thanks."
    )

    assert extract_code(transcript) == "4821"


def test_extract_context_match_spans_lines() -> None:
    transcript = (
        "STUDENT: I wrote 2000 words.\n\n"
        "EXAMINER: What is your access code?\n\n"
        "STUDENT: Sure.\n\n"
        "STUDENT: 6135"
    )

    assert extract_code(transcript) == "6135"


def test_extract_context_match_is_case_insensitive() -> None:
    assert extract_code("EXAMINER: 1111 first. STUDENT: CODE: 2468") == "2468"


def test_extract_falls_back_to_student_lines() -> None:
    transcript = "STUDENT: 7777 is a number I like. EXAMINER: interesting."

    assert extract_code(transcript) == "7777"


def test_extract_student_tier_ignores_examiner_numbers() -> None:
    transcript = format_transcript(
        [
            {"role": "agent", "message": "Welcome, this is room 3030."},
            {"role": "user", "message": "Hi, I am ready.\nMy number is 5150."},
        ]
    )

    assert extract_code(transcript) == "5150"


def test_extract_global_fallback_uses_first_run() -> None:
    transcript = "EXAMINER: Session 9021 opened, then 8000 more."

    assert extract_code(transcript) == "9021"


def test_extract_requires_exactly_four_digits() -> None:
    assert extract_code("STUDENT: my phone is 555123 and id 12") is None
    assert extract_code("STUDENT: reference 12345, code 3344") == "3344"


def test_extract_returns_none_without_digits() -> None:
    assert extract_code("EXAMINER: What is your code?\n\nSTUDENT: I forgot.") is None
    assert extract_code("") is None


def test_extract_only_matches_ascii_digits() -> None:
    arabic_indic = "١٢٣٤"

    assert extract_code(f"STUDENT: my code is {arabic_indic}, I mean 4821") == "4821"
    assert extract_code(f"STUDENT: it is {arabic_indic}") is None

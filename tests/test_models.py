"""Tests for request validation and lenient response normalization."""

import pytest
from pydantic import ValidationError

from app.modules.flashcards.models.flashcards import (
    DEFAULT_COUNT,
    DEFAULT_TITLE,
    Flashcard,
    GenerationRequest,
    Mode,
    Style,
    clamp_count,
    parse_generation_payload,
)


class TestGenerationRequest:
    def test_notes_are_trimmed(self) -> None:
        request = GenerationRequest(notes="  photosynthesis  ")

        assert request.notes == "photosynthesis"
        assert request.count == DEFAULT_COUNT
        assert request.style is Style.BALANCED
        assert request.mode is Mode.AUTO

    def test_blank_notes_are_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Please paste your notes first."):
            GenerationRequest(notes=" \n\t ")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(1, 3), (3, 3), (20, 20), (50, 50), (500, 50), ("7", 7), ("lots", DEFAULT_COUNT), (None, DEFAULT_COUNT)],
    )
    def test_count_is_clamped(self, raw, expected) -> None:
        assert clamp_count(raw) == expected
        assert GenerationRequest(notes="x", count=raw).count == expected

    def test_payload_uses_wire_values(self) -> None:
        request = GenerationRequest(
            notes="cells", count=10, style=Style.EXAM, mode=Mode.SHORT_NOTES
        )

        assert request.to_payload() == {
            "notes": "cells",
            "count": 10,
            "style": "exam",
            "mode": "short_notes",
        }


class TestParseGenerationPayload:
    def test_full_payload(self) -> None:
        result = parse_generation_payload(
            {
                "title": "Chem",
                "flashcards": [
                    {"question": "H2O?", "answer": "Water", "tags": ["basics", "water"]}
                ],
            }
        )

        assert result.title == "Chem"
        assert result.flashcards == (
            Flashcard(question="H2O?", answer="Water", tags=("basics", "water")),
        )

    def test_flashcards_not_a_list_becomes_empty(self) -> None:
        result = parse_generation_payload({"flashcards": "not-an-array"})

        assert result.flashcards == ()
        assert result.title == DEFAULT_TITLE

    @pytest.mark.parametrize("title", [None, "", "   ", 42, ["x"]])
    def test_bad_title_falls_back(self, title) -> None:
        assert parse_generation_payload({"title": title}).title == DEFAULT_TITLE

    @pytest.mark.parametrize("payload", [None, [], "text", 3])
    def test_non_object_payload_is_empty_result(self, payload) -> None:
        result = parse_generation_payload(payload)

        assert result.title == DEFAULT_TITLE
        assert result.flashcards == ()

    def test_unusable_entries_are_skipped(self) -> None:
        result = parse_generation_payload(
            {
                "flashcards": [
                    "just text",
                    {"question": "Q only"},
                    {"question": "  ", "answer": "blank question"},
                    {"question": " Kept ", "answer": " yes ", "tags": "not-a-list"},
                ]
            }
        )

        assert result.flashcards == (Flashcard(question="Kept", answer="yes"),)

    def test_flashcard_rejects_blank_text(self) -> None:
        with pytest.raises(ValidationError):
            Flashcard(question="Q", answer="   ")

"""Pydantic models for the notes-to-flashcards contract.

The generation endpoint is allowed to drift: ``parse_generation_payload``
substitutes defaults for a missing title or a missing/non-list ``flashcards``
field and skips entries that are not usable cards, rather than failing.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.exceptions import NOTES_REQUIRED_MESSAGE

DEFAULT_TITLE = "Flashcards"
DEFAULT_COUNT = 12
MIN_COUNT = 3
MAX_COUNT = 50


class Style(str, enum.Enum):
    BALANCED = "balanced"
    EXAM = "exam"
    SIMPLE = "simple"


class Mode(str, enum.Enum):
    AUTO = "auto"
    QUESTIONS = "questions"
    SHORT_NOTES = "short_notes"


def clamp_count(value: Any) -> int:
    """Coerce a requested card count into ``[MIN_COUNT, MAX_COUNT]``."""
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_COUNT
    return max(MIN_COUNT, min(MAX_COUNT, n))


class Flashcard(BaseModel):
    """Question/answer flashcard with optional tags."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    tags: Optional[tuple[str, ...]] = None

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"question": self.question, "answer": self.answer}
        if self.tags is not None:
            data["tags"] = list(self.tags)
        return data


class GenerationRequest(BaseModel):
    """Body of a generation call: notes plus generation parameters."""

    model_config = ConfigDict(frozen=True)

    notes: str
    count: int = DEFAULT_COUNT
    style: Style = Style.BALANCED
    mode: Mode = Mode.AUTO

    @field_validator("notes")
    @classmethod
    def _trim_notes(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(NOTES_REQUIRED_MESSAGE)
        return v

    @field_validator("count", mode="before")
    @classmethod
    def _clamp_count(cls, v: Any) -> int:
        return clamp_count(v)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class GenerationResult(BaseModel):
    """A titled, ordered set of flashcards."""

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    flashcards: tuple[Flashcard, ...] = Field(default_factory=tuple)


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _parse_card(item: Any) -> Optional[Flashcard]:
    if not isinstance(item, dict):
        return None
    question = _as_text(item.get("question"))
    answer = _as_text(item.get("answer"))
    if not question or not answer:
        return None
    raw_tags = item.get("tags")
    tags = None
    if isinstance(raw_tags, list):
        tags = tuple(t for t in (_as_text(x) for x in raw_tags) if t)
    return Flashcard(question=question, answer=answer, tags=tags)


def parse_generation_payload(payload: Any) -> GenerationResult:
    """Normalize a decoded endpoint response into a ``GenerationResult``.

    Never raises on shape mismatch.
    """
    if not isinstance(payload, dict):
        payload = {}

    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        title = DEFAULT_TITLE

    raw_cards = payload.get("flashcards")
    if not isinstance(raw_cards, list):
        raw_cards = []

    cards = []
    for item in raw_cards:
        card = _parse_card(item)
        if card is not None:
            cards.append(card)

    return GenerationResult(title=title.strip(), flashcards=tuple(cards))

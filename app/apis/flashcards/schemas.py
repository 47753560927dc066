from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

from app.modules.flashcards.models.flashcards import DEFAULT_COUNT, GenerationResult


class FlashcardsRequest(BaseModel):
    notes: str = Field(default="", description="Study notes to turn into flashcards")
    count: Union[int, float, str, None] = Field(
        default=DEFAULT_COUNT, description="Requested number of cards (clamped to 3-50)"
    )
    style: str = Field(default="balanced", description="balanced, exam or simple")
    mode: str = Field(default="auto", description="auto, questions or short_notes")


class FlashcardOut(BaseModel):
    question: str
    answer: str
    tags: Optional[list[str]] = None


class FlashcardsResponse(BaseModel):
    title: str
    flashcards: list[FlashcardOut] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: GenerationResult) -> "FlashcardsResponse":
        return cls(
            title=result.title,
            flashcards=[FlashcardOut(**c.to_dict()) for c in result.flashcards],
        )


class ErrorResponse(BaseModel):
    error: str

from .flashcards import (
    DEFAULT_COUNT,
    DEFAULT_TITLE,
    MAX_COUNT,
    MIN_COUNT,
    Flashcard,
    GenerationRequest,
    GenerationResult,
    Mode,
    Style,
    clamp_count,
    parse_generation_payload,
)

__all__ = [
    "DEFAULT_COUNT",
    "DEFAULT_TITLE",
    "MAX_COUNT",
    "MIN_COUNT",
    "Flashcard",
    "GenerationRequest",
    "GenerationResult",
    "Mode",
    "Style",
    "clamp_count",
    "parse_generation_payload",
]

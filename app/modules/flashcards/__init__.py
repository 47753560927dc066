"""Flashcards module exports."""

from .models.flashcards import (
    Flashcard,
    GenerationRequest,
    GenerationResult,
    Mode,
    Style,
    parse_generation_payload,
)
from .client import GenerationClient
from .export import to_csv, to_json, export_filename, download_text

__all__ = [
    "Flashcard",
    "GenerationRequest",
    "GenerationResult",
    "Mode",
    "Style",
    "parse_generation_payload",
    "GenerationClient",
    "to_csv",
    "to_json",
    "export_filename",
    "download_text",
]

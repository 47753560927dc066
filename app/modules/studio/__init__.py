"""Studio exports."""

from .flip_card import CardFace, FlipCard, FlipCardDeck, SystemClipboard
from .view_model import Phase, Role, StudioState, StudioViewModel, TranscriptEntry

__all__ = [
    "CardFace",
    "FlipCard",
    "FlipCardDeck",
    "SystemClipboard",
    "Phase",
    "Role",
    "StudioState",
    "StudioViewModel",
    "TranscriptEntry",
]

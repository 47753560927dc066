"""Flip-card state for the studio deck.

Each card shows its question until activated, then its answer. Copying is a
separate action and never flips the card. Cards are keyed by their position
in the current set; a position whose card changes starts again on the
question face.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence

import pyperclip

from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import Flashcard
from app.modules.user_profile.theme import ProfileTheme

logger = get_logger(__name__)

MAX_VISIBLE_TAGS = 4
SCRIM = "rgba(0,0,0,0.55)"


class Clipboard(Protocol):
    def write_text(self, text: str) -> None: ...


class SystemClipboard:
    """System clipboard via pyperclip."""

    def write_text(self, text: str) -> None:
        pyperclip.copy(text)


@dataclass(frozen=True)
class FaceBackground:
    image_url: str

    @property
    def background_image(self) -> str:
        return f"linear-gradient(to bottom, {SCRIM}, {SCRIM}), url({self.image_url})"


@dataclass(frozen=True)
class CardFace:
    label: str
    text: str
    tags: tuple[str, ...]
    background: Optional[FaceBackground]


def visible_tags(tags: Optional[Sequence[str]]) -> tuple[str, ...]:
    """First four distinct tags, in order."""
    seen: list[str] = []
    for tag in tags or ():
        if tag not in seen:
            seen.append(tag)
        if len(seen) == MAX_VISIBLE_TAGS:
            break
    return tuple(seen)


class FlipCard:
    def __init__(
        self,
        card: Flashcard,
        theme: Optional[ProfileTheme] = None,
        clipboard: Optional[Clipboard] = None,
    ) -> None:
        self.card = card
        self.theme = theme or ProfileTheme()
        self.clipboard = clipboard or SystemClipboard()
        self._showing_answer = False

    @property
    def showing_answer(self) -> bool:
        return self._showing_answer

    def activate(self) -> bool:
        self._showing_answer = not self._showing_answer
        return self._showing_answer

    def copy(self) -> bool:
        """Copy question and answer; failures are ignored."""
        try:
            self.clipboard.write_text(f"{self.card.question}\n\n{self.card.answer}")
        except Exception as e:  # noqa: BLE001
            logger.debug("Clipboard write failed: %s", e)
            return False
        return True

    def render(self) -> CardFace:
        if self._showing_answer:
            label, text, image = "Answer", self.card.answer, self.theme.back_image_url
        else:
            label, text, image = "Question", self.card.question, self.theme.front_image_url
        return CardFace(
            label=label,
            text=text,
            tags=visible_tags(self.card.tags),
            background=FaceBackground(image) if image else None,
        )


class FlipCardDeck:
    """Flip-cards for the current set, keyed by position."""

    def __init__(self, clipboard: Optional[Clipboard] = None) -> None:
        self.clipboard = clipboard
        self.theme = ProfileTheme()
        self._cards: list[FlipCard] = []

    def load(self, cards: Sequence[Flashcard], theme: Optional[ProfileTheme] = None) -> None:
        if theme is not None:
            self.theme = theme
        previous = self._cards
        rebuilt = []
        for index, card in enumerate(cards):
            old = previous[index] if index < len(previous) else None
            if old is not None and old.card == card:
                old.theme = self.theme
                rebuilt.append(old)
            else:
                rebuilt.append(FlipCard(card, self.theme, self.clipboard))
        self._cards = rebuilt

    def __len__(self) -> int:
        return len(self._cards)

    def __getitem__(self, index: int) -> FlipCard:
        return self._cards[index]

    def __iter__(self) -> Iterator[FlipCard]:
        return iter(self._cards)

    def activate(self, index: int) -> bool:
        return self._cards[index].activate()

    def copy(self, index: int) -> bool:
        return self._cards[index].copy()

    def faces(self) -> list[CardFace]:
        return [c.render() for c in self._cards]

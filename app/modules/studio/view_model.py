"""Studio view-model: notes in, flashcards and a running transcript out.

Each generation cycle moves through ``IDLE -> SUBMITTING -> READY | ERROR``.
The transcript spans cycles and is only cleared by ``reset``. Title and
cards live in a single ``GenerationResult`` so they are always replaced
together.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from app.core.config import settings
from app.core.exceptions import (
    AuthRequiredError,
    ExportUnavailableError,
    FlashForgeError,
    NotesRequiredError,
)
from app.core.logging import get_logger
from app.modules.auth.session import SessionProvider
from app.modules.flashcards.export import (
    ExportFile,
    build_csv_export,
    build_json_export,
    download_text,
)
from app.modules.flashcards.models.flashcards import (
    DEFAULT_COUNT,
    Flashcard,
    GenerationRequest,
    GenerationResult,
    Mode,
    Style,
    clamp_count,
)
from app.modules.studio.flip_card import Clipboard, FlipCardDeck
from app.modules.user_profile.theme import ProfileTheme

logger = get_logger(__name__)

FAILURE_REPLY = (
    "I couldn't generate flashcards from that input. Try shorter notes or clearer headings."
)
UNEXPECTED_ERROR_MESSAGE = "Something went wrong"


def success_reply(result: GenerationResult) -> str:
    return (
        f'Done. I created {len(result.flashcards)} flashcards: "{result.title}". '
        "Tap a card to flip, copy, or export."
    )


class Generator(Protocol):
    async def generate(
        self, request: GenerationRequest, auth_token: str
    ) -> GenerationResult: ...


class Phase(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    READY = "ready"
    ERROR = "error"


class Role(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class TranscriptEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


@dataclass(frozen=True)
class StudioState:
    """Immutable snapshot of everything the studio shows."""

    phase: Phase
    notes: str
    count: int
    style: Style
    mode: Mode
    loading: bool
    error: Optional[str]
    result: GenerationResult
    transcript: tuple[TranscriptEntry, ...]


Listener = Callable[[StudioState], None]


class StudioViewModel:
    def __init__(
        self,
        generator: Generator,
        auth: SessionProvider,
        *,
        theme: Optional[ProfileTheme] = None,
        clipboard: Optional[Clipboard] = None,
    ) -> None:
        self.generator = generator
        self.auth = auth
        self.theme = theme or ProfileTheme()
        self.deck = FlipCardDeck(clipboard)
        self.deck.load((), self.theme)

        self.notes = ""
        self.count = DEFAULT_COUNT
        self.style = Style.BALANCED
        self.mode = Mode.AUTO
        self.phase = Phase.IDLE
        self.loading = False
        self.error: Optional[str] = None
        self._result = GenerationResult()
        self._transcript: list[TranscriptEntry] = []
        self._listeners: list[Listener] = []
        self._closed = False

    # Derived state ---------------------------------------------------------
    @property
    def title(self) -> str:
        return self._result.title

    @property
    def flashcards(self) -> tuple[Flashcard, ...]:
        return self._result.flashcards

    @property
    def result(self) -> GenerationResult:
        return self._result

    @property
    def transcript(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._transcript)

    @property
    def has_conversation(self) -> bool:
        return bool(self._transcript)

    @property
    def can_submit(self) -> bool:
        return not self.loading

    @property
    def can_export(self) -> bool:
        return bool(self._result.flashcards)

    @property
    def card_summary(self) -> str:
        n = len(self._result.flashcards)
        return f"{n} cards • tap to flip" if n else "Your cards will appear here"

    def state(self) -> StudioState:
        return StudioState(
            phase=self.phase,
            notes=self.notes,
            count=self.count,
            style=self.style,
            mode=self.mode,
            loading=self.loading,
            error=self.error,
            result=self._result,
            transcript=tuple(self._transcript),
        )

    # Observers -------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        snapshot = self.state()
        for listener in list(self._listeners):
            listener(snapshot)

    # Inputs ----------------------------------------------------------------
    def set_notes(self, notes: str) -> None:
        self.notes = notes
        self._emit()

    def set_count(self, count: object) -> None:
        self.count = clamp_count(count)
        self._emit()

    def set_style(self, style: Style | str) -> None:
        self.style = Style(style)
        self._emit()

    def set_mode(self, mode: Mode | str) -> None:
        self.mode = Mode(mode)
        self._emit()

    # Generation ------------------------------------------------------------
    async def submit(self, notes: Optional[str] = None) -> Phase:
        """Generate a new set from ``notes`` (or the current notes input)."""
        if self.loading or self._closed:
            return self.phase
        if notes is not None:
            self.notes = notes

        self.error = None
        clean = self.notes.strip()
        if not clean:
            self.error = NotesRequiredError().message
            self.phase = Phase.ERROR
            self._emit()
            return self.phase

        self.loading = True
        self.phase = Phase.SUBMITTING
        self._transcript.append(TranscriptEntry(role=Role.USER, content=clean))
        self._emit()

        try:
            session = await self.auth.get_session()
            token = session.access_token if session is not None else ""
            if not token:
                raise AuthRequiredError()
            request = GenerationRequest(
                notes=clean, count=self.count, style=self.style, mode=self.mode
            )
            result = await self.generator.generate(request, token)
        except FlashForgeError as e:
            self._fail(e.message)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected failure while generating flashcards")
            self._fail(UNEXPECTED_ERROR_MESSAGE)
        else:
            self._succeed(result)
        return self.phase

    def _succeed(self, result: GenerationResult) -> None:
        if self._closed:
            return
        self._result = result
        self.deck.load(result.flashcards, self.theme)
        self._transcript.append(
            TranscriptEntry(role=Role.ASSISTANT, content=success_reply(result))
        )
        self.phase = Phase.READY
        self.loading = False
        self._emit()

    def _fail(self, message: str) -> None:
        if self._closed:
            return
        self.error = message
        self._transcript.append(TranscriptEntry(role=Role.ASSISTANT, content=FAILURE_REPLY))
        self.phase = Phase.ERROR
        self.loading = False
        self._emit()

    def reset(self) -> None:
        self.notes = ""
        self._result = GenerationResult()
        self.deck.load((), self.theme)
        self._transcript.clear()
        self.error = None
        self.phase = Phase.IDLE
        self._emit()

    def close(self) -> None:
        """Detach the view-model; late generation results are dropped."""
        self._closed = True
        self._listeners.clear()

    # Export ----------------------------------------------------------------
    def export_csv(self) -> ExportFile:
        self._require_cards()
        return build_csv_export(self.title, self.flashcards)

    def export_json(self) -> ExportFile:
        self._require_cards()
        return build_json_export(self.title, self.flashcards)

    def download(self, fmt: str, directory: Optional[Path | str] = None) -> Path:
        exporters = {"csv": self.export_csv, "json": self.export_json}
        if fmt not in exporters:
            raise ValueError(f"Unsupported export format: {fmt}")
        export = exporters[fmt]()
        return download_text(
            export.filename,
            export.content,
            export.mime_type,
            directory if directory is not None else settings.export_dir,
        )

    def _require_cards(self) -> None:
        if not self.can_export:
            raise ExportUnavailableError()

"""Pytest configuration and fixtures."""

from typing import Optional

import pytest

from app.modules.auth.session import (
    AuthChangeEvent,
    AuthListener,
    Session,
    SessionUser,
    Subscription,
)
from app.modules.flashcards.models.flashcards import (
    Flashcard,
    GenerationRequest,
    GenerationResult,
)
from app.modules.user_profile.theme import ProfileTheme


class FakeAuth:
    """In-memory session provider."""

    def __init__(self, session: Optional[Session] = None) -> None:
        self.session = session
        self.listeners: list[AuthListener] = []
        self.sign_out_calls = 0
        self.sign_out_error: Optional[Exception] = None

    async def get_session(self) -> Optional[Session]:
        return self.session

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        self.listeners.append(callback)
        return Subscription(self.listeners, callback)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        self.session = make_session()
        self.emit(AuthChangeEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.session = None
        self.emit(AuthChangeEvent.SIGNED_OUT, None)
        if self.sign_out_error is not None:
            raise self.sign_out_error

    def emit(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        for callback in list(self.listeners):
            callback(event, session)


class FakeNavigator:
    def __init__(self) -> None:
        self.history: list[tuple[str, str]] = []

    def replace(self, path: str) -> None:
        self.history.append(("replace", path))

    def push(self, path: str) -> None:
        self.history.append(("push", path))

    @property
    def location(self) -> Optional[str]:
        return self.history[-1][1] if self.history else None


class FakeProfiles:
    def __init__(self, theme: Optional[ProfileTheme] = None) -> None:
        self.theme = theme or ProfileTheme()
        self.calls: list[tuple[str, str]] = []

    async def fetch_theme(self, user_id: str, access_token: str) -> ProfileTheme:
        self.calls.append((user_id, access_token))
        return self.theme


class FakeClipboard:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.texts: list[str] = []

    def write_text(self, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.texts.append(text)


class FakeGenerator:
    """Generation client double returning a fixed result or raising."""

    def __init__(
        self,
        result: Optional[GenerationResult] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.result = result or GenerationResult()
        self.error = error
        self.calls: list[tuple[GenerationRequest, str]] = []

    async def generate(self, request: GenerationRequest, auth_token: str) -> GenerationResult:
        self.calls.append((request, auth_token))
        if self.error is not None:
            raise self.error
        return self.result


def make_session(
    user_id: str = "user-1", token: str = "access-token", expires_at: Optional[int] = None
) -> Session:
    return Session(
        access_token=token,
        refresh_token="refresh-token",
        expires_at=expires_at,
        user=SessionUser(id=user_id, email="student@example.com"),
    )


@pytest.fixture
def session() -> Session:
    return make_session()


@pytest.fixture
def auth(session: Session) -> FakeAuth:
    return FakeAuth(session)


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def sample_cards() -> list[Flashcard]:
    return [
        Flashcard(question="What is ATP?", answer="The cell's energy currency", tags=("biology",)),
        Flashcard(question='What does "mitosis" produce?', answer="Two identical cells"),
    ]

"""Exception hierarchy shared by the studio client and the generation API."""

from typing import Optional


NOTES_REQUIRED_MESSAGE = "Please paste your notes first."
LOGIN_AGAIN_MESSAGE = "Please log in again."
GENERATION_FAILED_MESSAGE = "Failed to generate"


class FlashForgeError(Exception):
    """Base exception for all FlashForge errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotesRequiredError(FlashForgeError):
    """Notes input was empty after trimming."""

    def __init__(self, message: str = NOTES_REQUIRED_MESSAGE) -> None:
        super().__init__(message, status_code=400)


class AuthRequiredError(FlashForgeError):
    """No usable access token; the user has to sign in again."""

    def __init__(self, message: str = LOGIN_AGAIN_MESSAGE) -> None:
        super().__init__(message, status_code=401)


class AuthError(FlashForgeError):
    """The identity provider rejected a sign-in attempt."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code=status_code)


class GenerationError(FlashForgeError):
    """The generation endpoint failed or reported an error."""

    def __init__(
        self,
        message: str = GENERATION_FAILED_MESSAGE,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code=status_code or 502)
        self.http_status = status_code


class ExportUnavailableError(FlashForgeError):
    """Export was requested while the current set is empty."""

    def __init__(self, message: str = "There are no flashcards to export.") -> None:
        super().__init__(message, status_code=400)

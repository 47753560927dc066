"""Session handling against the external identity provider.

``SupabaseAuth`` talks to a GoTrue-compatible auth API over httpx, keeps the
current session in memory (optionally mirrored to a JSON file so the terminal
front end survives restarts) and notifies subscribers whenever the session
appears or goes away.
"""

from __future__ import annotations

import enum
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.exceptions import AuthError
from app.core.logging import get_logger

logger = get_logger(__name__)


class AuthChangeEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: SessionUser

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now if now is not None else time.time()) >= self.expires_at

    @classmethod
    def from_token_response(cls, data: dict[str, Any]) -> "Session":
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = int(time.time()) + int(data["expires_in"])
        user = data.get("user") or {}
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            user=SessionUser(id=str(user["id"]), email=user.get("email")),
        )


AuthListener = Callable[[AuthChangeEvent, Optional[Session]], None]


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, listeners: list[AuthListener], callback: AuthListener) -> None:
        self._listeners = listeners
        self.callback = callback

    @property
    def active(self) -> bool:
        return self.callback in self._listeners

    def unsubscribe(self) -> None:
        if self.callback in self._listeners:
            self._listeners.remove(self.callback)


class SessionProvider(Protocol):
    async def get_session(self) -> Optional[Session]: ...

    def on_auth_state_change(self, callback: AuthListener) -> Subscription: ...

    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    async def sign_out(self) -> None: ...


def _provider_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class SupabaseAuth:
    """GoTrue-compatible ``SessionProvider``."""

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        *,
        session_file: Optional[Path] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        base = (url or settings.identity.url).rstrip("/")
        self.auth_url = f"{base}/auth/v1"
        self.anon_key = settings.identity.anon_key if anon_key is None else anon_key
        self.session_file = session_file
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.identity.timeout_seconds
        )
        self._listeners: list[AuthListener] = []
        self._session: Optional[Session] = None
        self._loaded = False

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # Listeners -----------------------------------------------------------
    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def _notify(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        for callback in list(self._listeners):
            callback(event, session)

    # Session storage -----------------------------------------------------
    def _load(self) -> None:
        self._loaded = True
        if not self.session_file or not self.session_file.exists():
            return
        try:
            self._session = Session.model_validate_json(
                self.session_file.read_text(encoding="utf-8")
            )
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.session_file, e)
            self._session = None

    def _store(self, session: Optional[Session]) -> None:
        self._session = session
        if not self.session_file:
            return
        if session is None:
            self.session_file.unlink(missing_ok=True)
            return
        self.session_file.parent.mkdir(parents=True, exist_ok=True)
        self.session_file.write_text(session.model_dump_json(), encoding="utf-8")

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"apikey": self.anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    # SessionProvider -----------------------------------------------------
    async def get_session(self) -> Optional[Session]:
        if not self._loaded:
            self._load()
        if self._session is not None and self._session.is_expired():
            logger.info("Stored session for user %s has expired", self._session.user.id)
            self._store(None)
            self._notify(AuthChangeEvent.SIGNED_OUT, None)
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        try:
            response = await self._client.post(
                f"{self.auth_url}/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("Sign-in request failed: %s", e)
            raise AuthError("Unable to reach the sign-in service", status_code=503) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success or not isinstance(body, dict):
            raise AuthError(
                _provider_message(body, "Invalid login credentials"),
                status_code=response.status_code,
            )

        try:
            session = Session.from_token_response(body)
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError("Unexpected response from the sign-in service") from e

        self._loaded = True
        self._store(session)
        logger.info("Signed in as user %s", session.user.id)
        self._notify(AuthChangeEvent.SIGNED_IN, session)
        return session

    async def sign_out(self) -> None:
        """Revoke the session remotely and always drop it locally.

        Raises ``AuthError`` after the local sign-out when the revoke call fails.
        """
        session = await self.get_session()
        failure: Optional[AuthError] = None
        if session is not None:
            try:
                response = await self._client.post(
                    f"{self.auth_url}/logout", headers=self._headers(session.access_token)
                )
                # 401/404 mean the session is already gone on the provider side
                if not response.is_success and response.status_code not in (401, 404):
                    failure = AuthError("Sign-out failed", status_code=response.status_code)
            except httpx.HTTPError as e:
                failure = AuthError(f"Sign-out failed: {e}", status_code=503)

        self._loaded = True
        self._store(None)
        if session is not None:
            logger.info("Signed out user %s", session.user.id)
            self._notify(AuthChangeEvent.SIGNED_OUT, None)
        if failure is not None:
            raise failure

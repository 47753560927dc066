"""Auth gate for the studio and the login surface.

``AuthGate.mount`` runs a fixed effect list once:

1. subscribe to session changes (kept until ``teardown``),
2. check for an existing session; none -> redirect to the login surface,
3. fetch the profile theme for the signed-in user, then unlock the studio.

Any later transition to "no session" redirects immediately.
"""

from __future__ import annotations

import enum
from typing import Optional, Protocol

from app.core.exceptions import AuthError
from app.core.logging import get_logger
from app.modules.auth.session import (
    AuthChangeEvent,
    Session,
    SessionProvider,
    Subscription,
)
from app.modules.user_profile.theme import ProfileReader, ProfileTheme

logger = get_logger(__name__)

LANDING_PATH = "/"
LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


class Navigator(Protocol):
    def replace(self, path: str) -> None: ...

    def push(self, path: str) -> None: ...


class GateStatus(str, enum.Enum):
    CHECKING = "checking"
    REDIRECTED = "redirected"
    READY = "ready"


class AuthGate:
    def __init__(
        self,
        auth: SessionProvider,
        profiles: ProfileReader,
        navigator: Navigator,
    ) -> None:
        self.auth = auth
        self.profiles = profiles
        self.navigator = navigator
        self.status = GateStatus.CHECKING
        self.session: Optional[Session] = None
        self.theme = ProfileTheme()
        self._subscription: Optional[Subscription] = None
        self._torn_down = False

    @property
    def is_ready(self) -> bool:
        return self.status is GateStatus.READY

    async def mount(self) -> GateStatus:
        if self._subscription is None and not self._torn_down:
            self._subscription = self.auth.on_auth_state_change(self._on_auth_change)

        session = await self.auth.get_session()
        if self._torn_down or self.status is GateStatus.REDIRECTED:
            return self.status
        if session is None:
            self._redirect()
            return self.status

        theme = await self.profiles.fetch_theme(session.user.id, session.access_token)
        if self._torn_down or self.status is GateStatus.REDIRECTED:
            return self.status

        self.session = session
        self.theme = theme
        self.status = GateStatus.READY
        return self.status

    def teardown(self) -> None:
        self._torn_down = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def sign_out(self) -> None:
        try:
            await self.auth.sign_out()
        except Exception as e:  # noqa: BLE001
            logger.warning("Sign-out did not complete cleanly: %s", e)
        self.navigator.push(LANDING_PATH)

    def _on_auth_change(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        if session is None:
            self._redirect()
        elif self.status is GateStatus.READY:
            self.session = session

    def _redirect(self) -> None:
        if self.status is GateStatus.REDIRECTED:
            return
        self.status = GateStatus.REDIRECTED
        self.session = None
        self.navigator.replace(LOGIN_PATH)


class LoginForm:
    """Email/password sign-in surface."""

    def __init__(self, auth: SessionProvider, navigator: Navigator) -> None:
        self.auth = auth
        self.navigator = navigator
        self.loading = False
        self.error: Optional[str] = None

    async def check_existing(self) -> bool:
        """Skip the form when a session already exists."""
        if await self.auth.get_session() is not None:
            self.navigator.replace(DASHBOARD_PATH)
            return True
        return False

    async def submit(self, email: str, password: str) -> bool:
        self.loading = True
        self.error = None
        try:
            await self.auth.sign_in_with_password(email, password)
        except AuthError as e:
            self.error = e.message
            return False
        finally:
            self.loading = False
        self.navigator.push(DASHBOARD_PATH)
        return True

from .session import (
    AuthChangeEvent,
    Session,
    SessionProvider,
    SessionUser,
    Subscription,
    SupabaseAuth,
)
from .gate import AuthGate, GateStatus, LoginForm, Navigator

__all__ = [
    "AuthChangeEvent",
    "Session",
    "SessionProvider",
    "SessionUser",
    "Subscription",
    "SupabaseAuth",
    "AuthGate",
    "GateStatus",
    "LoginForm",
    "Navigator",
]

import time
from typing import Dict, Any
import jwt


class JWTManager:
    """Verifies access tokens issued by the identity provider.

    The provider signs its access tokens with a shared HS256 secret and an
    ``aud`` claim (``authenticated`` for signed-in users). ``generate_token``
    mints compatible tokens for local development and tests.
    """

    algorithm = "HS256"

    def __init__(
        self, secret: str, audience: str, token_lifetime_seconds: int = 3600
    ):
        self.secret = secret
        self.audience = audience
        self.token_lifetime_seconds = token_lifetime_seconds

    def generate_token(self, user_data: Dict[str, Any]) -> str:
        """Generate a provider-compatible access token for the user"""
        now = int(time.time())

        payload = {
            "aud": self.audience,
            "sub": user_data["sub"],
            "email": user_data.get("email"),
            "role": "authenticated",
            "iat": now,
            "exp": now + self.token_lifetime_seconds,
        }

        for key, value in user_data.items():
            if key not in ["sub", "email"] and value is not None:
                payload[key] = value

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode an access token"""
        if not self.secret:
            raise ValueError("Invalid token: verification secret is not configured")
        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"require": ["exp", "sub"]},
            )
            return decoded
        except jwt.PyJWTError as e:
            raise ValueError(f"Invalid token: {e}")


# Initialize JWT manager using settings
from app.core.config import settings

jwt_manager = JWTManager(
    secret=settings.identity.jwt_secret,
    audience=settings.identity.jwt_audience,
)

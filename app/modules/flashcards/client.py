"""HTTP client for the notes-to-flashcards generation endpoint.

One authenticated POST per call, no retries and no caching. Responses are
decoded leniently (see ``parse_generation_payload``); only a non-success
status, a transport failure, an undecodable body or an explicit ``error``
field turn into ``GenerationError``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import (
    GENERATION_FAILED_MESSAGE,
    AuthRequiredError,
    GenerationError,
)
from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import (
    GenerationRequest,
    GenerationResult,
    parse_generation_payload,
)

logger = get_logger(__name__)


def _error_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, str) and err.strip():
            return err.strip()
        if err:
            return str(err)
    return None


def _failure_message(body: Any) -> Optional[str]:
    message = _error_message(body)
    if message is None and isinstance(body, dict):
        # FastAPI-style {"detail": "..."} bodies
        detail = body.get("detail")
        if isinstance(detail, str) and detail.strip():
            return detail.strip()
    return message


class GenerationClient:
    """Sends ``GenerationRequest``s to the configured endpoint."""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint_url = endpoint_url or settings.generation.endpoint_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.generation.timeout_seconds
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GenerationClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def generate(
        self, request: GenerationRequest, auth_token: str
    ) -> GenerationResult:
        if not auth_token:
            raise AuthRequiredError()

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {auth_token}",
        }
        logger.info(
            "Requesting %d flashcards (style=%s, mode=%s, notes=%d chars)",
            request.count,
            request.style.value,
            request.mode.value,
            len(request.notes),
        )
        try:
            response = await self._client.post(
                self.endpoint_url, json=request.to_payload(), headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("Generation request failed: %s", e)
            raise GenerationError() from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = _failure_message(body)
            logger.warning(
                "Generation endpoint returned %d: %s",
                response.status_code,
                message or "no error message",
            )
            raise GenerationError(message or GENERATION_FAILED_MESSAGE, response.status_code)
        message = _error_message(body)
        if message:
            logger.warning("Generation endpoint reported an error: %s", message)
            raise GenerationError(message, response.status_code)
        if body is None:
            logger.warning("Generation endpoint returned an undecodable body")
            raise GenerationError(status_code=response.status_code)

        result = parse_generation_payload(body)
        logger.info("Received %d flashcards titled %r", len(result.flashcards), result.title)
        return result

from __future__ import annotations

from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, status

from app.apis.deps import AuthenticatedUser, current_user
from app.core.exceptions import FlashForgeError, GenerationError, NotesRequiredError
from app.core.logging import get_logger
from app.modules.flashcards.generator import generate_flashcards
from app.modules.flashcards.models.flashcards import (
    GenerationRequest,
    GenerationResult,
    Mode,
    Style,
)
from .schemas import ErrorResponse, FlashcardsRequest, FlashcardsResponse

logger = get_logger(__name__)

router = APIRouter()

Generate = Callable[[GenerationRequest], Awaitable[GenerationResult]]

CurrentUser = Annotated[AuthenticatedUser, Depends(current_user)]


def get_generator() -> Generate:
    return generate_flashcards


def _parse_request(req: FlashcardsRequest) -> GenerationRequest:
    notes = req.notes.strip()
    if not notes:
        raise NotesRequiredError("Notes are required")
    try:
        style = Style(req.style)
    except ValueError:
        raise FlashForgeError(f"Unsupported style: {req.style}", status_code=400)
    try:
        mode = Mode(req.mode)
    except ValueError:
        raise FlashForgeError(f"Unsupported mode: {req.mode}", status_code=400)
    return GenerationRequest(notes=notes, count=req.count, style=style, mode=mode)


@router.post(
    "/api/flashcards",
    response_model=FlashcardsResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    tags=["flashcards"],
)
async def create_flashcards(
    req: FlashcardsRequest,
    user: CurrentUser,
    generate: Generate = Depends(get_generator),
) -> FlashcardsResponse:
    request = _parse_request(req)
    logger.info(
        "Requested %d cards (style=%s, mode=%s, notes=%d chars)",
        request.count,
        request.style.value,
        request.mode.value,
        len(request.notes),
    )
    try:
        result = await generate(request)
    except Exception as e:  # noqa: BLE001
        logger.exception("Flashcard generation failed")
        raise GenerationError() from e

    logger.info("Generated %d cards", len(result.flashcards))
    return FlashcardsResponse.from_result(result)

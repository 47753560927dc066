"""Notes-to-flashcards generator using pydantic-ai.

The model provider is chosen from settings (Google Gemini or OpenRouter).
Imports for the providers are kept lazy to avoid import-time errors when
credentials are missing.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from app.core.config import settings
from app.modules.flashcards.models.flashcards import (
    GenerationRequest,
    GenerationResult,
    Mode,
    Style,
    parse_generation_payload,
)


class GeneratedCard(BaseModel):
    question: str
    answer: str
    tags: list[str] = Field(default_factory=list)


class GeneratedDeck(BaseModel):
    """Structured output for the flashcards agent."""

    title: str
    flashcards: list[GeneratedCard] = Field(default_factory=list)


def _build_google_model(model_name: str):
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel, GoogleModelSettings
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    settings_obj = GoogleModelSettings(google_thinking_config={"thinking_budget": 0})
    return GoogleModel(model_name, provider=provider, settings=settings_obj)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model(settings.flashcards_model)


SYSTEM_PROMPT = (
    "You turn a student's study notes into flashcards. "
    "Return a single JSON object that validates as GeneratedDeck: {title, flashcards}. "
    "Rules: "
    "- Title: short and specific to the notes. "
    "- Flashcards: question/answer pairs in plain text (no markdown). "
    "  Each question is clear and atomic; each answer is concise. "
    "  Only use facts that appear in the notes. "
    "- Tags: 1-3 short lowercase keywords per card. "
    "- Create exactly N cards (provided in the instruction) unless the notes "
    "  are too short, in which case create as many good cards as they support. "
    "- No extra keys or commentary; do not include code fences."
)

STYLE_GUIDANCE = {
    Style.BALANCED: "Mix definitions, key facts and short conceptual questions.",
    Style.EXAM: (
        "Focus on what is most likely to be tested: definitions, formulas, "
        "named results and precise facts. Answers must be exam-ready."
    ),
    Style.SIMPLE: "Use simple language and very short answers for quick review.",
}

MODE_GUIDANCE = {
    Mode.AUTO: "Choose the best card format for each part of the notes.",
    Mode.QUESTIONS: "Phrase every card front as a direct question.",
    Mode.SHORT_NOTES: (
        "Phrase every card front as a short topic or term and the back as a "
        "compact note summarizing it."
    ),
}


def _build_instruction(request: GenerationRequest) -> str:
    return (
        "Create flashcards from the notes below. "
        "Follow the system rules and output only the JSON object.\n\n"
        f"N: {request.count}\n"
        f"Style: {STYLE_GUIDANCE[request.style]}\n"
        f"Format: {MODE_GUIDANCE[request.mode]}\n\n"
        f"Notes:\n{request.notes}"
    )


def build_flashcards_agent() -> Agent[None, GeneratedDeck]:
    model = _build_model_by_settings()
    agent: Agent[None, GeneratedDeck] = Agent[None, GeneratedDeck](
        model=model,
        output_type=GeneratedDeck,
        system_prompt=SYSTEM_PROMPT,
        retries=3,
    )
    return agent


async def generate_flashcards(request: GenerationRequest) -> GenerationResult:
    """Generate and normalize a flashcard set for the request."""
    agent = build_flashcards_agent()
    res = await agent.run(_build_instruction(request))
    return postprocess(res.output, limit=request.count)


def postprocess(deck: GeneratedDeck, *, limit: int) -> GenerationResult:
    """Light normalization: trims text, drops empty cards, caps the count."""
    result = parse_generation_payload(deck.model_dump())
    return result.model_copy(update={"flashcards": result.flashcards[:limit]})

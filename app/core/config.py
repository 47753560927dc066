from pathlib import Path
from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    url: str = Field(default="http://localhost:54321", alias="SUPABASE_URL")
    anon_key: str = Field(default="", alias="SUPABASE_ANON_KEY")
    jwt_secret: str = Field(default="", alias="SUPABASE_JWT_SECRET")
    jwt_audience: str = Field(default="authenticated", alias="SUPABASE_JWT_AUDIENCE")
    timeout_seconds: float = Field(default=10.0, alias="IDENTITY_TIMEOUT_SECONDS")
    session_file: Path = Field(
        default=Path.home() / ".flashforge" / "session.json", alias="SESSION_FILE"
    )


class GenerationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    endpoint_url: str = Field(
        default="http://localhost:9000/api/flashcards", alias="GENERATION_ENDPOINT_URL"
    )
    timeout_seconds: float = Field(default=60.0, alias="GENERATION_TIMEOUT_SECONDS")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashforge-studio", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    identity: IdentitySettings = Field(default_factory=lambda: IdentitySettings())
    generation: GenerationSettings = Field(default_factory=lambda: GenerationSettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    openrouter_model: str = Field(
        default="google/gemini-2.0-flash-001", alias="OPENROUTER_MODEL"
    )
    flashcards_model: str = Field(default="gemini-2.0-flash", alias="FLASHCARDS_MODEL")

    export_dir: Path = Field(default=Path("."), alias="EXPORT_DIR")


settings = Settings()

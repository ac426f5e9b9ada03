from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SYSTEM_INSTRUCTION = """You are Cyber AI, an advanced AI assistant with a cyber-themed personality.
You are knowledgeable, helpful, and provide detailed responses.
You can assist with coding, creative tasks, analysis, and general questions.
Maintain a professional yet engaging tone that matches your cyber AI theme."""

SERVICE_NAME = "Cyber AI"


class Settings(BaseSettings):
    # --- Gemini ---
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")

    # --- Persistence ---
    # firestore://<project>[/<database>] selects Firestore, anything else keeps chats in memory
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "APP_ENV"),
    )

    # --- HTTP ---
    cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=5000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # --- Chat Settings ---
    max_chat_title_length: int = 50
    title_prompt_chars: int = 200

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated CORS origins to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

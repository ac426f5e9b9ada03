import logging
from typing import Optional, Sequence

from google import genai
from google.genai import types

from cyber_ai.config import SYSTEM_INSTRUCTION
from cyber_ai.errors import (
    AuthError,
    ConfigurationError,
    GenerationError,
    QuotaError,
    RateLimitError,
)
from cyber_ai.models.domain import HistoryTurn

DEFAULT_TITLE = "New Conversation"
EMPTY_RESPONSE_FALLBACK = "I apologize, but I couldn't generate a response. Please try again."

# Gemini names the assistant side of a conversation "model"
_PROVIDER_ROLES = {"user": "user", "assistant": "model"}


def classify_provider_error(exc: Exception) -> GenerationError:
    """Map a raw provider failure onto the client-facing error it should surface as."""
    text = str(exc)
    if "API_KEY" in text:
        return AuthError("Invalid or missing API key. Please check your Gemini API configuration.")
    if "quota" in text:
        return QuotaError("API quota exceeded. Please try again later.")
    if "rate" in text:
        return RateLimitError("Rate limit exceeded. Please wait a moment before sending another message.")
    return GenerationError("Failed to generate AI response. Please try again.")


class ResponseGenerator:
    """Wrapper around the Google Gen AI SDK for chat replies and conversation titles."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        system_instruction: str = SYSTEM_INSTRUCTION,
        client: Optional[genai.Client] = None,
        max_title_length: int = 50,
        title_prompt_chars: int = 200,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.system_instruction = system_instruction
        self.max_title_length = max_title_length
        self.title_prompt_chars = title_prompt_chars
        self._client = client

    @property
    def client(self) -> genai.Client:
        # Built on first use so the app can start without a key.
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY environment variable is required")
            logging.info("Initialising Google Gen AI client …")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def _build_contents(message: str, history: Sequence[HistoryTurn]) -> list[types.Content]:
        contents = [
            types.Content(role=_PROVIDER_ROLES[turn.role], parts=[types.Part(text=turn.content)])
            for turn in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))
        return contents

    # ---------- chat replies ---------------------------------------------------
    async def generate_chat_response(self, message: str, history: Sequence[HistoryTurn] = ()) -> str:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is required")

        contents = self._build_contents(message, history)
        cfg = types.GenerateContentConfig(system_instruction=self.system_instruction)

        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=cfg,
            )
        except Exception as exc:
            logging.error("Gemini API error: %s", exc, exc_info=True)
            raise classify_provider_error(exc) from exc

        text = getattr(resp, "text", None)
        if not text:
            logging.warning("Empty or filtered response: %s", resp)
            return EMPTY_RESPONSE_FALLBACK
        return text

    # ---------- titles ---------------------------------------------------------
    async def generate_conversation_title(self, first_message: str) -> str:
        """Short title for a conversation. Falls back to ``DEFAULT_TITLE`` on any failure."""
        prompt = (
            "Generate a short, descriptive title (max 50 characters) for a conversation "
            f'that starts with: "{first_message[:self.title_prompt_chars]}"'
        )
        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
            )
            text = (getattr(resp, "text", None) or "")[:self.max_title_length]
            title = text.replace("'", "").replace('"', "").strip()
        except Exception as exc:
            logging.error("Error generating conversation title: %s", exc)
            return DEFAULT_TITLE
        return title or DEFAULT_TITLE

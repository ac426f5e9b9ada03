"""Exceptions surfaced by the chat flow.

Everything deriving from ``CyberAIError`` carries a message that is safe to
show to the client and is answered with HTTP 400. Any other exception is an
unexpected failure (HTTP 500).
"""


class CyberAIError(Exception):
    """Base class for client-visible failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CyberAIError):
    """The chat request body is malformed."""


class ConfigurationError(CyberAIError):
    """No Gemini API key is configured."""


class GenerationError(CyberAIError):
    """The provider call failed."""


class AuthError(GenerationError):
    pass


class QuotaError(GenerationError):
    pass


class RateLimitError(GenerationError):
    pass

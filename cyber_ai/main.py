import logging
import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cyber_ai import __version__
from cyber_ai.api.routers import chat, conversations
from cyber_ai.config import SERVICE_NAME, Settings, get_settings
from cyber_ai.errors import CyberAIError, ValidationError
from cyber_ai.models.domain import HealthResponse
from cyber_ai.services.llm_service import ResponseGenerator
from cyber_ai.services.storage import Storage, build_storage
from cyber_ai.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def cyber_ai_error_handler(request: Request, exc: CyberAIError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError(_describe_validation_error(exc))
    logger.warning("%s %s rejected: %s", request.method, request.url.path, error.message)
    return await cyber_ai_error_handler(request, error)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    generator: Optional[ResponseGenerator] = None,
) -> FastAPI:
    """Build the API with explicitly constructed storage and generator."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Cyber AI Backend",
        description="Chat API that answers with Gemini and keeps the conversation history.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.storage = storage or build_storage(settings)
    app.state.generator = generator or ResponseGenerator(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        max_title_length=settings.max_chat_title_length,
        title_prompt_chars=settings.title_prompt_chars,
    )
    if not settings.gemini_api_key and generator is None:
        logger.warning("GEMINI_API_KEY / GOOGLE_API_KEY not set; chat requests will fail until it is configured")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info("%s %s %s in %.0fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(CyberAIError, cyber_ai_error_handler)

    app.include_router(chat.router)
    app.include_router(conversations.router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok", service=SERVICE_NAME)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cyber_ai.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

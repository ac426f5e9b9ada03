import logging

from fastapi import APIRouter, Depends, HTTPException, status

from cyber_ai.api.deps import get_chat_service
from cyber_ai.errors import CyberAIError
from cyber_ai.models.domain import ChatRequest, ChatResponse, ErrorResponse
from cyber_ai.services.chat import ChatService

router = APIRouter(prefix="/api", tags=["chat"])

UNEXPECTED_ERROR = "An unexpected error occurred while processing your request."


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def post_chat_message(
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Send a message, get the assistant's reply and the conversation it was stored under."""
    try:
        return await chat_service.handle_message(body.message, body.conversationId)
    except CyberAIError as e:
        logging.warning(f"Chat error ({type(e).__name__}): {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logging.error(f"Chat error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR)

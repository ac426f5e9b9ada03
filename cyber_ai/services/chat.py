"""Chat orchestration: history lookup, one Gemini call, then persist both turns."""

import logging
from typing import Optional

from cyber_ai.models.domain import (
    ChatResponse,
    HistoryTurn,
    InsertConversation,
    InsertMessage,
)

from .llm_service import ResponseGenerator
from .storage import Storage

logger = logging.getLogger(__name__)


class ChatService:
    """Stateless across requests; all state lives in ``storage``."""

    def __init__(self, storage: Storage, generator: ResponseGenerator):
        self.storage = storage
        self.generator = generator

    def load_history(self, conversation_id: Optional[str]) -> list[HistoryTurn]:
        if not conversation_id:
            return []
        return [
            HistoryTurn(role=msg.role, content=msg.content)
            for msg in self.storage.get_messages_by_conversation(conversation_id)
        ]

    async def handle_message(self, message: str, conversation_id: Optional[str] = None) -> ChatResponse:
        """Answer ``message`` and record the exchange.

        Nothing is written when generation fails. The history read and the two
        message writes are separate store calls, so a conversation deleted in
        between ends up with messages under its old id.
        """
        history = self.load_history(conversation_id)

        ai_response = await self.generator.generate_chat_response(message, history)

        current_id = conversation_id
        if not current_id:
            title = await self.generator.generate_conversation_title(message)
            conversation = self.storage.create_conversation(InsertConversation(title=title))
            current_id = conversation.id
            logger.info("Started conversation %s ('%s')", current_id, title)

        self.storage.create_message(InsertMessage(conversationId=current_id, role="user", content=message))
        self.storage.create_message(InsertMessage(conversationId=current_id, role="assistant", content=ai_response))

        return ChatResponse(response=ai_response, conversationId=current_id)

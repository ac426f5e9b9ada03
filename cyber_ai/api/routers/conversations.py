import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from cyber_ai.api.deps import get_storage
from cyber_ai.models.domain import Conversation, DeleteResponse, Message
from cyber_ai.services.storage import Storage

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("", response_model=List[Conversation])
async def get_conversation_list(storage: Storage = Depends(get_storage)):
    """Retrieves all conversations, newest first."""
    try:
        return storage.get_all_conversations()
    except Exception as e:
        logging.error(f"Error fetching conversations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch conversations")


@router.get("/{conversation_id}/messages", response_model=List[Message])
async def get_messages_for_conversation(
    conversation_id: str = Path(..., title="The ID of the conversation"),
    storage: Storage = Depends(get_storage),
):
    """Retrieves all messages of a conversation, oldest first. Unknown ids give an empty list."""
    try:
        return storage.get_messages_by_conversation(conversation_id)
    except Exception as e:
        logging.error(f"Error fetching messages for conversation {conversation_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch conversation messages")


@router.delete("/{conversation_id}", response_model=DeleteResponse)
async def delete_conversation(
    conversation_id: str = Path(..., title="The ID of the conversation to delete"),
    storage: Storage = Depends(get_storage),
):
    """Deletes a conversation and all its messages."""
    try:
        storage.delete_conversation(conversation_id)
        return DeleteResponse(success=True)
    except Exception as e:
        logging.error(f"Error deleting conversation {conversation_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete conversation")

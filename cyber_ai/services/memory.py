import datetime as _dt
import threading
import uuid
from typing import Dict, List, Optional

from cyber_ai.models.domain import (
    Conversation,
    InsertConversation,
    InsertMessage,
    InsertUser,
    Message,
    User,
)

from .storage import Storage


class MemStorage(Storage):
    """Process-local storage backed by insertion-ordered dicts."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._conversations: Dict[str, Conversation] = {}
        self._messages: Dict[str, Message] = {}
        self._lock = threading.Lock()

    # --------------------------------------------------------------------- #
    # Users
    # --------------------------------------------------------------------- #
    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            users = list(self._users.values())
        return next((u for u in users if u.username == username), None)

    def create_user(self, user: InsertUser) -> User:
        created = User(id=str(uuid.uuid4()), **user.model_dump())
        with self._lock:
            self._users[created.id] = created
        return created

    # --------------------------------------------------------------------- #
    # Conversations
    # --------------------------------------------------------------------- #
    def create_conversation(self, conversation: InsertConversation) -> Conversation:
        created = Conversation(
            id=str(uuid.uuid4()),
            createdAt=_dt.datetime.now(_dt.timezone.utc),
            **conversation.model_dump(),
        )
        with self._lock:
            self._conversations[created.id] = created
        return created

    def get_all_conversations(self) -> List[Conversation]:
        with self._lock:
            conversations = list(self._conversations.values())
        return sorted(conversations, key=lambda c: c.createdAt, reverse=True)

    def delete_conversation(self, conversation_id: str) -> None:
        with self._lock:
            self._conversations.pop(conversation_id, None)
            stale = [mid for mid, m in self._messages.items() if m.conversationId == conversation_id]
            for mid in stale:
                del self._messages[mid]

    # --------------------------------------------------------------------- #
    # Messages
    # --------------------------------------------------------------------- #
    def create_message(self, message: InsertMessage) -> Message:
        created = Message(
            id=str(uuid.uuid4()),
            timestamp=_dt.datetime.now(_dt.timezone.utc),
            **message.model_dump(),
        )
        with self._lock:
            self._messages[created.id] = created
        return created

    def get_messages_by_conversation(self, conversation_id: str) -> List[Message]:
        with self._lock:
            messages = [m for m in self._messages.values() if m.conversationId == conversation_id]
        # stable sort keeps insertion order for equal timestamps
        return sorted(messages, key=lambda m: m.timestamp)

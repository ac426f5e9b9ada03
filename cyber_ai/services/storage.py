"""Storage interface for users, conversations and messages.

Routes and the chat service only talk to ``Storage``; ``build_storage`` picks
the concrete backend from ``DATABASE_URL``.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from cyber_ai.config import Settings
from cyber_ai.models.domain import (
    Conversation,
    InsertConversation,
    InsertMessage,
    InsertUser,
    Message,
    User,
)

_FIRESTORE_SCHEME = "firestore://"


class Storage(ABC):

    # --- Users ---
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, user: InsertUser) -> User: ...

    # --- Conversations ---
    @abstractmethod
    def create_conversation(self, conversation: InsertConversation) -> Conversation: ...

    @abstractmethod
    def get_all_conversations(self) -> List[Conversation]:
        """Newest first."""

    @abstractmethod
    def delete_conversation(self, conversation_id: str) -> None:
        """Delete the conversation and all of its messages. Unknown ids are ignored."""

    # --- Messages ---
    @abstractmethod
    def create_message(self, message: InsertMessage) -> Message: ...

    @abstractmethod
    def get_messages_by_conversation(self, conversation_id: str) -> List[Message]:
        """Oldest first."""


def parse_firestore_url(url: str) -> Tuple[str, str]:
    """Split ``firestore://project[/database]`` into (project, database)."""
    rest = url[len(_FIRESTORE_SCHEME):].strip("/")
    if not rest:
        raise ValueError(f"Missing project in DATABASE_URL: {url}")
    project, _, database = rest.partition("/")
    return project, database or "(default)"


def build_storage(settings: Settings) -> Storage:
    url = settings.database_url or ""
    if url.startswith(_FIRESTORE_SCHEME):
        from .firestore import FirestoreStorage

        project, database = parse_firestore_url(url)
        logging.info(f"Using Firestore storage (project '{project}', database '{database}')")
        return FirestoreStorage(project_id=project, db_name=database)

    from .memory import MemStorage

    if url:
        logging.warning("DATABASE_URL is not a firestore:// URL, keeping chats in memory")
    else:
        logging.info("Using in-memory storage")
    return MemStorage()

import datetime as _dt
import logging
import uuid
from typing import List, Optional

from google.cloud import firestore

from cyber_ai.models.domain import (
    Conversation,
    InsertConversation,
    InsertMessage,
    InsertUser,
    Message,
    User,
)

from .storage import Storage

_BATCH_LIMIT = 400
# messages created without a conversation id live outside any conversation document
_UNASSIGNED_COLLECTION = "unassigned_messages"


class FirestoreStorage(Storage):
    """Storage backed by Firestore.

    Layout: ``users/{id}``, ``conversations/{id}`` and the messages of a
    conversation in ``conversations/{id}/messages/{id}``.
    """

    def __init__(self, project_id: str, db_name: str = "(default)", client: Optional[firestore.Client] = None) -> None:
        self.db = client or firestore.Client(project=project_id, database=db_name)
        self._users_coll = self.db.collection("users")
        self._conversations_coll = self.db.collection("conversations")
        logging.info(f"FirestoreStorage initialized for project '{project_id}', database '{db_name}'")

    def _messages_coll(self, conversation_id: Optional[str]):
        if conversation_id is None:
            return self.db.collection(_UNASSIGNED_COLLECTION)
        return self._conversations_coll.document(conversation_id).collection("messages")

    # --------------------------------------------------------------------- #
    # Users
    # --------------------------------------------------------------------- #
    def get_user(self, user_id: str) -> Optional[User]:
        snapshot = self._users_coll.document(user_id).get()
        if not snapshot.exists:
            return None
        return User(id=snapshot.id, **snapshot.to_dict())

    def get_user_by_username(self, username: str) -> Optional[User]:
        docs = self._users_coll.where("username", "==", username).limit(1).stream()
        for doc in docs:
            return User(id=doc.id, **doc.to_dict())
        return None

    def create_user(self, user: InsertUser) -> User:
        user_id = str(uuid.uuid4())
        self._users_coll.document(user_id).set(user.model_dump())
        return User(id=user_id, **user.model_dump())

    # --------------------------------------------------------------------- #
    # Conversations
    # --------------------------------------------------------------------- #
    def create_conversation(self, conversation: InsertConversation) -> Conversation:
        created = Conversation(
            id=str(uuid.uuid4()),
            createdAt=_dt.datetime.now(_dt.timezone.utc),
            **conversation.model_dump(),
        )
        self._conversations_coll.document(created.id).set(created.model_dump(exclude={"id"}))
        logging.info(f"Created conversation {created.id}")
        return created

    def get_all_conversations(self) -> List[Conversation]:
        stream = self._conversations_coll.order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        ).stream()
        return [Conversation(id=doc.id, **doc.to_dict()) for doc in stream]

    def delete_conversation(self, conversation_id: str) -> None:
        conversation_ref = self._conversations_coll.document(conversation_id)

        # Messages may exist under an id whose conversation document is already gone,
        # so the subcollection is cleared regardless of the parent's existence.
        deleted_count = 0
        batch = self.db.batch()
        for msg in conversation_ref.collection("messages").stream():
            batch.delete(msg.reference)
            deleted_count += 1
            if deleted_count % _BATCH_LIMIT == 0:
                batch.commit()
                batch = self.db.batch()
        batch.delete(conversation_ref)
        batch.commit()
        logging.info(f"Deleted conversation {conversation_id} and {deleted_count} messages.")

    # --------------------------------------------------------------------- #
    # Messages
    # --------------------------------------------------------------------- #
    def create_message(self, message: InsertMessage) -> Message:
        created = Message(
            id=str(uuid.uuid4()),
            timestamp=_dt.datetime.now(_dt.timezone.utc),
            **message.model_dump(),
        )
        self._messages_coll(created.conversationId).document(created.id).set(
            created.model_dump(exclude={"id"})
        )
        return created

    def get_messages_by_conversation(self, conversation_id: str) -> List[Message]:
        stream = self._messages_coll(conversation_id).order_by(
            "timestamp", direction=firestore.Query.ASCENDING
        ).stream()
        return [Message(id=doc.id, **doc.to_dict()) for doc in stream]

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]


# --- Stored entities ---
class InsertUser(BaseModel):
    username: str
    password: str


class User(InsertUser):
    id: str


class InsertConversation(BaseModel):
    title: str


class Conversation(InsertConversation):
    id: str
    createdAt: datetime.datetime


class InsertMessage(BaseModel):
    conversationId: Optional[str] = None
    role: Role
    content: str


class Message(InsertMessage):
    id: str
    timestamp: datetime.datetime


class HistoryTurn(BaseModel):
    """One prior turn handed to the generator."""
    role: Role
    content: str


# --- API models ---
class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    conversationId: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
    conversationId: str


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str


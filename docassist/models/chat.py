from datetime import datetime, timezone
from typing import List, Literal, Optional
import uuid

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]
ResponseKind = Literal["text", "code", "diagram"]


class ResponseBlock(BaseModel):
    type: ResponseKind
    content: str
    language: Optional[str] = None
    title: Optional[str] = None


class Message(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Role
    content: List[ResponseBlock]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChatRequest(BaseModel):
    question: str = Field(..., min_length=1)

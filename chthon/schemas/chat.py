from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from chthon.models.enums import ChatRole


class ChatSessionCreate(BaseModel):
    name: Optional[str] = None


class ChatSessionUpdate(BaseModel):
    name: str = Field(..., min_length=1)


class ChatSessionOut(BaseModel):
    id: str
    name: str
    last_updated: datetime
    created_at: datetime


class ChatMessageCreate(BaseModel):
    role: ChatRole
    content: str
    image_url: Optional[str] = None


class ChatMessageOut(BaseModel):
    id: str
    session_id: str
    role: ChatRole
    content: str
    image_url: Optional[str] = None
    created_at: datetime


class ChatSessionDetailOut(ChatSessionOut):
    messages: list[ChatMessageOut] = []


class ConversationMessage(BaseModel):
    role: ChatRole
    content: str


class ChatCompletionRequest(BaseModel):
    session_id: Optional[str] = None
    content: Optional[str] = None
    messages: Optional[list[ConversationMessage]] = None
    provider: Optional[str] = None
    image_url: Optional[str] = None

    @model_validator(mode='after')
    def _check_mode(self):
        if self.session_id:
            if not self.content or not self.content.strip():
                raise ValueError('content is required when session_id is given')
        elif not self.messages:
            raise ValueError('either session_id and content, or messages, is required')
        return self


class ChatCompletionOut(BaseModel):
    role: ChatRole = ChatRole.ASSISTANT
    content: str
    provider: str
    model: str
    tokens: int
    session_id: Optional[str] = None
    message_id: Optional[str] = None

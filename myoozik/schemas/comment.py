# ============================================================================
# FILE: myoozik/schemas/comment.py
# ============================================================================
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from myoozik.config import settings

class CommentCreate(BaseModel):
    """Schema for posting a comment; blank nicknames become the default"""
    content: str
    nickname: Optional[str] = Field(None, validate_default=True)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value

    @field_validator("nickname")
    @classmethod
    def default_nickname(cls, value: Optional[str]) -> str:
        value = (value or "").strip()
        return value[:settings.NICKNAME_MAX_LENGTH] or settings.DEFAULT_NICKNAME

class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value

class CommentResponse(BaseModel):
    """Schema for comment response"""
    id: int
    content: str
    nickname: str
    created_at: datetime

    class Config:
        from_attributes = True

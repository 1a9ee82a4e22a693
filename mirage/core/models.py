"""Completion API wire models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    model: str
    max_tokens: int = Field(ge=1)
    messages: list[ChatMessage] = Field(default_factory=list)

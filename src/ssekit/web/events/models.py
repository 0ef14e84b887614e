"""Event push Pydantic models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PushEvent(BaseModel):
    event: str = Field(..., min_length=1)
    data: Any = ""


class PushResponse(BaseModel):
    status: str = "sent"
    session_id: str
    message_id: int | None = None


class SessionList(BaseModel):
    count: int
    session_ids: list[str] = []

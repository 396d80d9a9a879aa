"""Pydantic schemas for music generation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class MusicGenerateBody(BaseModel):
    prompt: str
    provider: Optional[str] = None
    model: Optional[str] = None
    negative_prompt: Optional[str] = None
    sample_count: int = Field(1, ge=1)
    seed: Optional[int] = Field(None, description="Cannot be combined with sample_count > 1 on Lyria")
    output_uri: Optional[str] = None

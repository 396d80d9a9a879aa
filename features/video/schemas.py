"""Pydantic schemas for video generation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class VideoGenerateBody(BaseModel):
    """Text-to-video, or image-to-video when an input image is given.

    The first frame can be passed as a location (``image_uri``) or inline
    (``image_base64``), not both.
    """

    prompt: str
    provider: Optional[str] = None
    model: Optional[str] = None
    negative_prompt: Optional[str] = None
    aspect_ratio: Optional[str] = Field(None, examples=["16:9", "9:16"])
    duration_seconds: Optional[int] = Field(None, gt=0)
    generate_audio: Optional[bool] = None
    seed: Optional[int] = None
    image_uri: Optional[str] = Field(None, description="Local path or gs:// / s3:// URI of the first frame")
    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None
    output_uri: Optional[str] = None


class VideoExtendBody(BaseModel):
    """Continue an existing clip stored in object storage."""

    prompt: str
    video_uri: str = Field(..., description="gs:// URI of the clip to extend")
    video_mime_type: str = "video/mp4"
    provider: Optional[str] = None
    model: Optional[str] = None
    duration_seconds: Optional[int] = Field(None, gt=0)
    seed: Optional[int] = None
    output_uri: Optional[str] = None

"""Pydantic schemas for image generation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ImageGenerateBody(BaseModel):
    prompt: str
    provider: Optional[str] = Field(None, description="Registered image provider; defaults per configuration")
    model: Optional[str] = Field(None, description="Model id or alias")
    negative_prompt: Optional[str] = None
    aspect_ratio: Optional[str] = Field(None, examples=["1:1", "16:9"])
    number_of_images: int = Field(1, ge=1)
    seed: Optional[int] = None
    output_uri: Optional[str] = Field(
        None,
        description="Local path or gs:// / s3:// URI; multiple images are written as stem_{i}.ext",
    )


class ImageUpscaleBody(BaseModel):
    """Upscale an image given as a location or inline base64, not both."""

    image_uri: Optional[str] = Field(None, description="Local path or gs:// / s3:// URI of the source image")
    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None
    upscale_factor: Optional[str] = Field(None, examples=["x2", "x4"])
    provider: Optional[str] = None
    output_uri: Optional[str] = None

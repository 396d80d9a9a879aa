"""Pydantic schemas for the avtool endpoints.

Every ``input``/``output`` field accepts a local path or an object URI
(``gs://bucket/key``, ``s3://bucket/key``).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from config import avtool as avtool_config


class MediaInfoRequest(BaseModel):
    input: str


class ConvertAudioRequest(BaseModel):
    input: str
    output: str
    bitrate: str = Field(avtool_config.DEFAULT_MP3_BITRATE, description="e.g. '128k', '192k', '320k'")


class VideoToGifRequest(BaseModel):
    input: str
    output: str
    fps: int = Field(avtool_config.DEFAULT_GIF_FPS, ge=1, le=50)
    width: Optional[int] = Field(None, gt=0, description="Output width; height keeps the aspect ratio")
    start_time: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, gt=0)


class CombineAudioVideoRequest(BaseModel):
    video_input: str
    audio_input: str
    output: str


class OverlayImageRequest(BaseModel):
    video_input: str
    image_input: str
    output: str
    x: int = 0
    y: int = 0
    scale: Optional[float] = Field(None, gt=0)
    start_time: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, gt=0)


class ConcatenateRequest(BaseModel):
    inputs: List[str]
    output: str


class AdjustVolumeRequest(BaseModel):
    input: str
    output: str
    volume: str = Field(..., description="Multiplier such as '0.5' or decibels such as '-3dB'")


class AudioLayer(BaseModel):
    path: str
    offset_seconds: float = Field(0.0, ge=0)
    volume: float = Field(1.0, ge=0)


class LayerAudioRequest(BaseModel):
    inputs: List[AudioLayer]
    output: str


__all__ = [
    "AdjustVolumeRequest",
    "AudioLayer",
    "CombineAudioVideoRequest",
    "ConcatenateRequest",
    "ConvertAudioRequest",
    "LayerAudioRequest",
    "MediaInfoRequest",
    "OverlayImageRequest",
    "VideoToGifRequest",
]

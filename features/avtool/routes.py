"""Audio/video processing HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from core.pydantic_schemas import ok
from features.avtool.schemas import (
    AdjustVolumeRequest,
    CombineAudioVideoRequest,
    ConcatenateRequest,
    ConvertAudioRequest,
    LayerAudioRequest,
    MediaInfoRequest,
    OverlayImageRequest,
    VideoToGifRequest,
)
from features.avtool.service import AVToolService
from features.dependencies import get_location_resolver, get_media_tools
from infrastructure.media_tools import MediaToolRunner
from infrastructure.storage.resolver import MediaLocationResolver

router = APIRouter(prefix="/avtool", tags=["avtool"])
logger = logging.getLogger(__name__)


def get_avtool_service(
    runner: MediaToolRunner = Depends(get_media_tools),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> AVToolService:
    return AVToolService(runner, resolver)


@router.post("/get_media_info")
async def get_media_info(
    request: MediaInfoRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    """Describe the container and streams of a media file."""

    logger.info("POST /avtool/get_media_info received (input=%s)", request.input)
    return ok("Media info retrieved", data=await service.get_media_info(request))


@router.post("/convert_wav_to_mp3")
async def convert_wav_to_mp3(
    request: ConvertAudioRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/convert_wav_to_mp3 received (input=%s, output=%s)", request.input, request.output)
    return ok("Audio converted", data=await service.convert_wav_to_mp3(request))


@router.post("/video_to_gif")
async def video_to_gif(
    request: VideoToGifRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/video_to_gif received (input=%s, output=%s)", request.input, request.output)
    return ok("GIF created", data=await service.video_to_gif(request))


@router.post("/combine_audio_video")
async def combine_audio_video(
    request: CombineAudioVideoRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/combine_audio_video received (output=%s)", request.output)
    return ok("Audio and video combined", data=await service.combine_audio_video(request))


@router.post("/overlay_image")
async def overlay_image(
    request: OverlayImageRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/overlay_image received (output=%s)", request.output)
    return ok("Image overlaid", data=await service.overlay_image(request))


@router.post("/concatenate")
async def concatenate(
    request: ConcatenateRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/concatenate received (inputs=%d, output=%s)", len(request.inputs), request.output)
    return ok("Media concatenated", data=await service.concatenate(request))


@router.post("/adjust_volume")
async def adjust_volume(
    request: AdjustVolumeRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    logger.info("POST /avtool/adjust_volume received (volume=%s, output=%s)", request.volume, request.output)
    return ok("Volume adjusted", data=await service.adjust_volume(request))


@router.post("/layer_audio")
async def layer_audio(
    request: LayerAudioRequest,
    service: AVToolService = Depends(get_avtool_service),
) -> Dict[str, Any]:
    """Mix several audio files with per-layer offsets and volumes."""

    logger.info("POST /avtool/layer_audio received (layers=%d, output=%s)", len(request.inputs), request.output)
    return ok("Audio layered", data=await service.layer_audio(request))

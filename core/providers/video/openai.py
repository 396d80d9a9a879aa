"""OpenAI Sora video generation provider."""

from __future__ import annotations

import io
import logging
from typing import Any, List, Tuple

import openai
from PIL import Image, UnidentifiedImageError

from config import video as video_config
from core.exceptions import GenerationFailedError, InvalidInputError, ProviderAPIError, RateLimitError
from core.providers.base import BaseVideoProvider, VideoRequest
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.operations import OperationPoller, PollResult
from core.providers.types import VideoImageRequest, VideoOutput

logger = logging.getLogger(__name__)

_FAILED_STATUSES = {"failed", "cancelled", "canceled"}


def _wrap_openai_error(exc: Exception, endpoint: str, provider: str) -> Exception:
    """Translate SDK exceptions into the provider error taxonomy."""

    if isinstance(exc, openai.RateLimitError):
        return RateLimitError(f"OpenAI rate limit on {endpoint}: {exc}", provider=provider)
    if isinstance(exc, openai.APIStatusError):
        return ProviderAPIError(
            f"OpenAI {endpoint} failed: {exc}",
            endpoint=endpoint,
            status_code=exc.status_code,
            provider=provider,
            original_error=exc,
        )
    if isinstance(exc, openai.APIConnectionError):
        return ProviderAPIError(
            f"OpenAI {endpoint} unreachable: {exc}",
            endpoint=endpoint,
            status_code=0,
            provider=provider,
            original_error=exc,
        )
    return ProviderAPIError(
        f"OpenAI {endpoint} failed: {exc}",
        endpoint=endpoint,
        status_code=0,
        provider=provider,
        original_error=exc,
    )


def prepare_input_reference(data: bytes, size: str) -> Tuple[str, bytes, str]:
    """Resize the first frame to the render size Sora expects."""

    width, height = (int(value) for value in size.split("x"))
    try:
        with Image.open(io.BytesIO(data)) as image:
            frame = image.convert("RGB")
            if frame.size != (width, height):
                frame = frame.resize((width, height), Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            frame.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidInputError(f"Input image could not be decoded: {exc}", field="image") from exc
    return "reference.png", buffer.getvalue(), "image/png"


class OpenAIVideoProvider(BaseVideoProvider):
    """Video generation using OpenAI's Sora models."""

    name = "sora"
    features = frozenset({Feature.ASPECT_RATIO, Feature.DURATION, Feature.GENERATE_AUDIO, Feature.IMAGE_INPUT})
    models = models_from_config(video_config.SORA_MODELS)
    default_model = video_config.SORA_DEFAULT_MODEL

    def __init__(self, client: Any, poller: OperationPoller) -> None:
        self.client = client
        self.poller = poller

    async def _generate(self, request: VideoRequest, model: ModelInfo) -> List[VideoOutput]:
        aspect_ratio = request.aspect_ratio or video_config.DEFAULT_ASPECT_RATIO
        size = video_config.SORA_ASPECT_RATIO_TO_SIZE[aspect_ratio]
        seconds = request.duration_seconds or min(model.durations)

        params: dict[str, Any] = {
            "prompt": request.prompt.strip(),
            "model": model.id,
            "seconds": str(seconds),
            "size": size,
        }
        if isinstance(request, VideoImageRequest):
            params["input_reference"] = prepare_input_reference(request.image_data, size)

        logger.info("Generating OpenAI Sora video: model=%s seconds=%s size=%s", model.id, seconds, size)

        try:
            job = await self.client.videos.create(**params)
        except Exception as exc:
            raise _wrap_openai_error(exc, "videos.create", self.name) from exc

        video_id = getattr(job, "id", None)
        if not video_id:
            raise ProviderAPIError(
                "OpenAI returned an invalid job identifier",
                endpoint="videos.create",
                status_code=200,
                provider=self.name,
            )

        if getattr(job, "status", None) != "completed":
            operation = self.poller.create(video_id, self._retrieve, provider=self.name)
            await self.poller.drive(operation)

        data = await self._download(video_id)
        return [VideoOutput(data=data, mime_type=video_config.DEFAULT_VIDEO_MIME_TYPE, duration_seconds=float(seconds))]

    async def _retrieve(self, video_id: str) -> PollResult[Any]:
        try:
            video = await self.client.videos.retrieve(video_id)
        except Exception as exc:
            raise _wrap_openai_error(exc, "videos.retrieve", self.name) from exc

        status = getattr(video, "status", None)
        if status == "completed":
            return PollResult(done=True, result=video)
        if status in _FAILED_STATUSES:
            error = getattr(video, "error", None)
            message = getattr(error, "message", None) or f"OpenAI video generation {status}"
            return PollResult(
                done=True,
                error=GenerationFailedError(message, provider=self.name, code=getattr(error, "code", None)),
            )
        logger.debug("OpenAI video %s status: %s", video_id, status)
        return PollResult(done=False)

    async def _download(self, video_id: str) -> bytes:
        """Download the MP4 payload for a completed Sora video."""

        try:
            response = await self.client.videos.download_content(video_id, variant="video")
        except Exception as exc:
            raise _wrap_openai_error(exc, "videos.download_content", self.name) from exc

        video_bytes = getattr(response, "content", None)
        if not video_bytes and hasattr(response, "aread"):
            video_bytes = await response.aread()

        if not video_bytes:
            raise GenerationFailedError("OpenAI returned empty video payload", provider=self.name)
        return bytes(video_bytes)


__all__ = ["OpenAIVideoProvider", "prepare_input_reference"]

"""Vertex AI Veo video generation provider.

Veo jobs are submitted through ``:predictLongRunning`` and tracked with
``:fetchPredictOperation``. The returned operation document looks like::

    {"name": "...", "done": true,
     "error": {"code": 3, "message": "..."},
     "response": {"videos": [{"gcsUri": "gs://...", "mimeType": "video/mp4"}
                              | {"bytesBase64Encoded": "...", "mimeType": "video/mp4"}],
                  "raiMediaFilteredCount": 0}}
"""

from __future__ import annotations

import base64
import functools
import logging
from typing import Any, Dict, List

from config import video as video_config
from core.clients.vertex import VertexClient
from core.exceptions import GenerationFailedError, InvalidInputError, ProviderAPIError
from core.providers.base import BaseVideoProvider, VideoRequest
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.operations import OperationPoller, PollResult
from core.providers.types import VideoExtendRequest, VideoImageRequest, VideoOutput
from core.utils.media import decode_base64

logger = logging.getLogger(__name__)


class VeoProvider(BaseVideoProvider):
    """Generate videos with Veo and drive the resulting operation to completion."""

    name = "veo"
    features = frozenset(
        {
            Feature.NEGATIVE_PROMPT,
            Feature.ASPECT_RATIO,
            Feature.DURATION,
            Feature.GENERATE_AUDIO,
            Feature.IMAGE_INPUT,
            Feature.SEED,
            Feature.VIDEO_EXTENSION,
        }
    )
    models = models_from_config(video_config.VEO_MODELS)
    default_model = video_config.VEO_DEFAULT_MODEL

    def __init__(self, client: VertexClient, poller: OperationPoller) -> None:
        self.client = client
        self.poller = poller

    @staticmethod
    def build_payload(request: VideoRequest, model: ModelInfo) -> Dict[str, Any]:
        instance: Dict[str, Any] = {"prompt": request.prompt}
        if isinstance(request, VideoImageRequest):
            instance["image"] = {
                "bytesBase64Encoded": base64.b64encode(request.image_data).decode("ascii"),
                "mimeType": request.image_mime_type,
            }

        parameters: Dict[str, Any] = {
            "aspectRatio": request.aspect_ratio or video_config.DEFAULT_ASPECT_RATIO,
            "durationSeconds": request.duration_seconds or video_config.DEFAULT_DURATION,
            "sampleCount": 1,
        }
        if request.negative_prompt:
            parameters["negativePrompt"] = request.negative_prompt
        if request.seed is not None:
            parameters["seed"] = request.seed
        if model.supports_audio:
            parameters["generateAudio"] = bool(request.generate_audio)
        return {"instances": [instance], "parameters": parameters}

    @staticmethod
    def build_extend_payload(request: VideoExtendRequest) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {
            "durationSeconds": request.duration_seconds or video_config.DEFAULT_DURATION,
            "sampleCount": 1,
        }
        if request.seed is not None:
            parameters["seed"] = request.seed
        return {
            "instances": [
                {
                    "prompt": request.prompt,
                    "video": {"gcsUri": request.video_uri, "mimeType": request.video_mime_type},
                }
            ],
            "parameters": parameters,
        }

    def _check_request(self, request: VideoRequest, model: ModelInfo) -> None:
        super()._check_request(request, model)
        if isinstance(request, VideoExtendRequest) and not request.video_uri.startswith("gs://"):
            raise InvalidInputError(
                f"Veo extends videos stored in Cloud Storage; got '{request.video_uri}'",
                field="video_uri",
                provider=self.name,
            )

    async def _generate(self, request: VideoRequest, model: ModelInfo) -> List[VideoOutput]:
        return await self._run(self.build_payload(request, model), request, model)

    async def _extend(self, request: VideoExtendRequest, model: ModelInfo) -> List[VideoOutput]:
        return await self._run(self.build_extend_payload(request), request, model)

    async def _run(self, payload: Dict[str, Any], request: VideoRequest, model: ModelInfo) -> List[VideoOutput]:
        submit_endpoint = self.client.model_endpoint(model.id, "predictLongRunning")
        submitted = await self.client.post_json(submit_endpoint, payload, provider=self.name)
        operation_name = submitted.get("name")
        if not operation_name:
            raise ProviderAPIError(
                "Veo did not return an operation name",
                endpoint=submit_endpoint,
                status_code=200,
                provider=self.name,
            )

        logger.info("Submitted Veo job %s (model=%s)", operation_name, model.id)
        operation = self.poller.create(
            operation_name,
            functools.partial(self._fetch_operation, model.id),
            provider=self.name,
        )
        response = await self.poller.drive(operation)
        return self._parse_videos(response, request)

    async def _fetch_operation(self, model_id: str, operation_name: str) -> PollResult[Dict[str, Any]]:
        endpoint = self.client.model_endpoint(model_id, "fetchPredictOperation")
        status = await self.client.post_json(endpoint, {"operationName": operation_name}, provider=self.name)
        if not status.get("done"):
            return PollResult(done=False)

        error = status.get("error")
        if error:
            return PollResult(
                done=True,
                error=GenerationFailedError(
                    f"Veo generation failed: {error.get('message') or error}",
                    provider=self.name,
                    code=error.get("code"),
                ),
            )
        return PollResult(done=True, result=status.get("response") or {})

    def _parse_videos(self, response: Dict[str, Any], request: VideoRequest) -> List[VideoOutput]:
        duration = float(request.duration_seconds or video_config.DEFAULT_DURATION)
        outputs: List[VideoOutput] = []
        for video in response.get("videos") or []:
            mime_type = video.get("mimeType") or video_config.DEFAULT_VIDEO_MIME_TYPE
            encoded = video.get("bytesBase64Encoded")
            if encoded:
                try:
                    data = decode_base64(encoded, field="bytesBase64Encoded")
                except ValueError as exc:
                    raise GenerationFailedError(str(exc), provider=self.name, original_error=exc) from exc
                outputs.append(VideoOutput(data=data, mime_type=mime_type, duration_seconds=duration))
            elif video.get("gcsUri"):
                outputs.append(
                    VideoOutput(data=b"", mime_type=mime_type, uri=video["gcsUri"], duration_seconds=duration)
                )

        if not outputs:
            filtered = response.get("raiMediaFilteredCount") or 0
            message = "Veo returned no videos"
            if filtered:
                message = f"{message}; {filtered} filtered by safety policy"
            raise GenerationFailedError(message, provider=self.name)
        return outputs


__all__ = ["VeoProvider"]

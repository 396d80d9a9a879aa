"""Vertex AI Lyria music generation provider."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from config import music as music_config
from core.clients.vertex import VertexClient
from core.exceptions import GenerationFailedError, InvalidInputError
from core.providers.base import BaseMusicProvider
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import AudioOutput, MusicRequest
from core.utils.media import decode_base64, wav_properties

logger = logging.getLogger(__name__)


class LyriaProvider(BaseMusicProvider):
    """Generate instrumental clips with Lyria through ``:predict``."""

    name = "lyria"
    features = frozenset({Feature.NEGATIVE_PROMPT, Feature.MULTIPLE_SAMPLES, Feature.SEED})
    models = models_from_config(music_config.LYRIA_MODELS)
    default_model = music_config.LYRIA_DEFAULT_MODEL

    def __init__(self, client: VertexClient) -> None:
        self.client = client

    def _check_request(self, request: MusicRequest, model: ModelInfo) -> None:
        super()._check_request(request, model)
        if request.seed is not None and request.sample_count > 1:
            raise InvalidInputError(
                "seed and sample_count > 1 cannot be combined",
                field="seed",
                provider=self.name,
            )

    @staticmethod
    def build_payload(request: MusicRequest) -> Dict[str, Any]:
        instance: Dict[str, Any] = {"prompt": request.prompt}
        if request.negative_prompt:
            instance["negativePrompt"] = request.negative_prompt

        parameters: Dict[str, Any] = {}
        if request.seed is not None:
            parameters["seed"] = request.seed
        else:
            parameters["sampleCount"] = request.sample_count
        return {"instances": [instance], "parameters": parameters}

    async def _generate(self, request: MusicRequest, model: ModelInfo) -> List[AudioOutput]:
        endpoint = self.client.model_endpoint(model.id, "predict")
        logger.info("Generating Lyria music: model=%s samples=%s", model.id, request.sample_count)
        response = await self.client.post_json(endpoint, self.build_payload(request), provider=self.name)

        outputs: List[AudioOutput] = []
        for prediction in response.get("predictions") or []:
            encoded = prediction.get("bytesBase64Encoded") or prediction.get("audioContent")
            if not encoded:
                continue
            try:
                data = decode_base64(encoded, field="bytesBase64Encoded")
            except ValueError as exc:
                raise GenerationFailedError(str(exc), provider=self.name, original_error=exc) from exc
            sample_rate, duration = wav_properties(data)
            outputs.append(
                AudioOutput(
                    data=data,
                    mime_type=prediction.get("mimeType") or music_config.OUTPUT_MIME_TYPE,
                    sample_rate=sample_rate,
                    duration_seconds=duration,
                )
            )

        if not outputs:
            raise GenerationFailedError("Lyria returned no audio", provider=self.name)
        return outputs


__all__ = ["LyriaProvider"]

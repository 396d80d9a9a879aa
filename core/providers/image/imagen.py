"""Vertex AI Imagen image generation provider."""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List

from config import image as image_config
from core.clients.vertex import VertexClient
from core.exceptions import GenerationFailedError
from core.providers.base import BaseImageProvider
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import ImageGenerateRequest, ImageOutput, ImageUpscaleRequest
from core.utils.media import decode_base64, image_dimensions

logger = logging.getLogger(__name__)


class ImagenProvider(BaseImageProvider):
    """Generate images with Imagen through the Vertex ``:predict`` endpoint."""

    name = "imagen"
    features = frozenset(
        {Feature.NEGATIVE_PROMPT, Feature.ASPECT_RATIO, Feature.SEED, Feature.MULTIPLE_SAMPLES, Feature.UPSCALE}
    )
    models = models_from_config(image_config.IMAGEN_MODELS)
    default_model = image_config.IMAGEN_DEFAULT_MODEL
    upscale_model = image_config.IMAGEN_UPSCALE_MODEL

    def __init__(self, client: VertexClient) -> None:
        self.client = client

    @staticmethod
    def build_payload(request: ImageGenerateRequest) -> Dict[str, Any]:
        instance: Dict[str, Any] = {"prompt": request.prompt}
        if request.negative_prompt:
            instance["negativePrompt"] = request.negative_prompt

        parameters: Dict[str, Any] = {"sampleCount": request.number_of_images}
        if request.aspect_ratio:
            parameters["aspectRatio"] = request.aspect_ratio
        if request.seed is not None:
            # Vertex rejects seeds while the invisible watermark is on
            parameters["seed"] = request.seed
            parameters["addWatermark"] = False
        return {"instances": [instance], "parameters": parameters}

    async def _generate(self, request: ImageGenerateRequest, model: ModelInfo) -> List[ImageOutput]:
        endpoint = self.client.model_endpoint(model.id, "predict")
        logger.info(
            "Generating Imagen image: model=%s samples=%s aspect_ratio=%s",
            model.id,
            request.number_of_images,
            request.aspect_ratio,
        )
        response = await self.client.post_json(endpoint, self.build_payload(request), provider=self.name)
        return self._parse_predictions(response)

    @staticmethod
    def build_upscale_payload(request: ImageUpscaleRequest, factor: str) -> Dict[str, Any]:
        return {
            "instances": [{"image": {"bytesBase64Encoded": base64.b64encode(request.image_data).decode("ascii")}}],
            "parameters": {"upscaleFactor": factor, "outputMimeType": image_config.DEFAULT_IMAGE_MIME_TYPE},
        }

    async def _upscale(self, request: ImageUpscaleRequest, factor: str) -> List[ImageOutput]:
        endpoint = self.client.model_endpoint(self.upscale_model, "predict")
        logger.info("Upscaling %d byte image with %s (%s)", len(request.image_data), self.upscale_model, factor)
        response = await self.client.post_json(
            endpoint,
            self.build_upscale_payload(request, factor),
            provider=self.name,
        )
        return self._parse_predictions(response)[:1]

    def _parse_predictions(self, response: Dict[str, Any]) -> List[ImageOutput]:
        outputs: List[ImageOutput] = []
        for prediction in response.get("predictions") or []:
            encoded = prediction.get("bytesBase64Encoded")
            if not encoded:
                continue
            try:
                data = decode_base64(encoded, field="bytesBase64Encoded")
            except ValueError as exc:
                raise GenerationFailedError(str(exc), provider=self.name, original_error=exc) from exc
            width, height = image_dimensions(data)
            outputs.append(
                ImageOutput(
                    data=data,
                    mime_type=prediction.get("mimeType") or image_config.DEFAULT_IMAGE_MIME_TYPE,
                    width=width,
                    height=height,
                )
            )

        if not outputs:
            # Responsible-AI filtering removes predictions without an error status
            reason = None
            for prediction in response.get("predictions") or []:
                reason = prediction.get("raiFilteredReason") or reason
            message = "Imagen returned no images"
            if reason:
                message = f"{message}: {reason}"
            raise GenerationFailedError(message, provider=self.name)
        return outputs


__all__ = ["ImagenProvider"]

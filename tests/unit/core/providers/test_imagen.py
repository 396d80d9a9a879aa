"""Tests for the Vertex AI Imagen provider."""

import base64
import io
import json

import httpx
import pytest
from PIL import Image

from core.clients.vertex import VertexClient
from core.exceptions import GenerationFailedError, InvalidInputError
from core.providers.image import ImagenProvider
from core.providers.types import ImageGenerateRequest, ImageUpscaleRequest


def png_bytes(width: int = 8, height: int = 4) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "red").save(buffer, format="PNG")
    return buffer.getvalue()


def make_provider(token_provider, http_client) -> ImagenProvider:
    client = VertexClient(
        project_id="demo-project",
        location="us-central1",
        token_provider=token_provider,
        http_client=http_client,
    )
    return ImagenProvider(client)


def test_payload_includes_watermark_flag_only_with_seed():
    payload = ImagenProvider.build_payload(
        ImageGenerateRequest(prompt="fox", negative_prompt="blur", aspect_ratio="16:9", number_of_images=2, seed=7)
    )

    assert payload == {
        "instances": [{"prompt": "fox", "negativePrompt": "blur"}],
        "parameters": {"sampleCount": 2, "aspectRatio": "16:9", "seed": 7, "addWatermark": False},
    }
    assert ImagenProvider.build_payload(ImageGenerateRequest(prompt="fox"))["parameters"] == {"sampleCount": 1}


@pytest.mark.anyio("asyncio")
async def test_generate_decodes_predictions(token_provider, recording_transport):
    image = png_bytes()
    transport, http_client = recording_transport(
        [
            httpx.Response(
                200,
                json={"predictions": [{"bytesBase64Encoded": base64.b64encode(image).decode(), "mimeType": "image/png"}]},
            )
        ]
    )
    provider = make_provider(token_provider, http_client)

    outputs = await provider.generate(ImageGenerateRequest(prompt="fox", model="imagen-3"))

    assert len(outputs) == 1
    assert outputs[0].data == image
    assert (outputs[0].width, outputs[0].height) == (8, 4)
    request = transport.requests[0]
    assert request.url.path.endswith("/publishers/google/models/imagen-3.0-generate-002:predict")
    assert json.loads(request.content)["instances"] == [{"prompt": "fox"}]


@pytest.mark.anyio("asyncio")
async def test_filtered_response_reports_reason(token_provider, recording_transport):
    _, http_client = recording_transport(
        [httpx.Response(200, json={"predictions": [{"raiFilteredReason": "person generation blocked"}]})]
    )
    provider = make_provider(token_provider, http_client)

    with pytest.raises(GenerationFailedError) as excinfo:
        await provider.generate(ImageGenerateRequest(prompt="fox"))
    assert "person generation blocked" in str(excinfo.value)


@pytest.mark.anyio("asyncio")
async def test_too_many_samples_rejected_without_request(token_provider, recording_transport):
    from core.exceptions import InvalidInputError

    transport, http_client = recording_transport([])
    provider = make_provider(token_provider, http_client)

    with pytest.raises(InvalidInputError):
        await provider.generate(ImageGenerateRequest(prompt="fox", number_of_images=5))
    assert transport.requests == []


@pytest.mark.anyio("asyncio")
async def test_upscale_posts_image_to_upscale_model(token_provider, recording_transport):
    source = png_bytes(4, 2)
    upscaled = png_bytes(16, 8)
    transport, http_client = recording_transport(
        [
            httpx.Response(
                200,
                json={"predictions": [{"bytesBase64Encoded": base64.b64encode(upscaled).decode(), "mimeType": "image/png"}]},
            )
        ]
    )
    provider = make_provider(token_provider, http_client)

    outputs = await provider.upscale(ImageUpscaleRequest(image_data=source, upscale_factor="x4"))

    assert [(output.width, output.height) for output in outputs] == [(16, 8)]
    request = transport.requests[0]
    assert request.url.path.endswith("/models/imagen-4.0-upscale-preview:predict")
    assert json.loads(request.content) == {
        "instances": [{"image": {"bytesBase64Encoded": base64.b64encode(source).decode()}}],
        "parameters": {"upscaleFactor": "x4", "outputMimeType": "image/png"},
    }


@pytest.mark.anyio("asyncio")
async def test_upscale_with_invalid_factor_makes_no_request(token_provider, recording_transport):
    transport, http_client = recording_transport([])
    provider = make_provider(token_provider, http_client)

    with pytest.raises(InvalidInputError):
        await provider.upscale(ImageUpscaleRequest(image_data=png_bytes(), upscale_factor="x8"))
    assert transport.requests == []

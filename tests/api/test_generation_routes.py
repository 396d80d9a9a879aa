"""HTTP tests for the generation endpoints and the error envelope."""

import base64


def test_health_lists_configured_providers(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["providers"]["speech"] == ["fake_speech", "silent"]


def test_generate_image_returns_envelope_with_inline_data(client, registry):
    response = client.post("/api/v1/image/generate", json={"prompt": "a red kite", "number_of_images": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["code"] == 200
    assert body["data"]["provider"] == "fake_image"
    assert body["data"]["model"] == "imagen-4.0-generate-preview-06-06"
    images = body["data"]["images"]
    assert [base64.b64decode(item["data_base64"]) for item in images] == [b"image-0", b"image-1"]
    assert registry.resolve("image").calls[0].prompt == "a red kite"


def test_generate_image_stores_output(client, gcs):
    response = client.post(
        "/api/v1/image/generate",
        json={"prompt": "a red kite", "output_uri": "gs://bucket/out/kite.png"},
    )

    assert response.json()["data"]["images"][0]["uri"] == "gs://bucket/out/kite.png"
    assert gcs.objects["gs://bucket/out/kite.png"] == b"image-0"


def test_unknown_provider_is_404_with_available_list(client):
    response = client.post("/api/v1/image/generate", json={"prompt": "kite", "provider": "dalle"})

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["data"]["error"] == "provider_not_configured"
    assert body["data"]["context"]["available"] == ["fake_image"]


def test_unsupported_aspect_ratio_is_400(client, registry):
    response = client.post("/api/v1/image/generate", json={"prompt": "kite", "aspect_ratio": "2:1"})

    assert response.status_code == 400
    assert response.json()["data"]["context"]["field"] == "aspect_ratio"
    assert registry.resolve("image").calls == []


def test_video_from_remote_image(client, registry):
    response = client.post(
        "/api/v1/video/generate",
        json={"prompt": "the frame comes alive", "image_uri": "gs://bucket/in/frame.png", "duration_seconds": 6},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["mode"] == "image_to_video"
    request = registry.resolve("video").calls[0]
    assert request.image_data == b"\x89PNG-frame"
    assert request.image_mime_type == "image/png"


def test_video_rejects_two_image_sources(client):
    response = client.post(
        "/api/v1/video/generate",
        json={
            "prompt": "x",
            "image_uri": "gs://bucket/in/frame.png",
            "image_base64": base64.b64encode(b"frame").decode(),
        },
    )

    assert response.status_code == 400
    assert response.json()["data"]["error"] == "validation_error"


def test_video_missing_remote_image_is_404(client):
    response = client.post("/api/v1/video/generate", json={"prompt": "x", "image_uri": "gs://bucket/in/nope.png"})

    assert response.status_code == 404


def test_speech_synthesis_and_voices(client):
    synth = client.post("/api/v1/speech/synthesize", json={"text": "hello there", "speaking_rate": 1.2})
    assert synth.status_code == 200
    assert synth.json()["data"]["audio"][0]["sample_rate"] == 24000

    voices = client.get("/api/v1/speech/voices", params={"language_code": "en-US"})
    assert voices.status_code == 200
    assert voices.json()["meta"] == {"count": 1}


def test_voice_listing_unsupported_is_400(client):
    response = client.get("/api/v1/speech/voices", params={"provider": "silent"})

    assert response.status_code == 400
    assert response.json()["data"]["error"] == "feature_not_supported"


def test_music_generation_samples(client):
    response = client.post("/api/v1/music/generate", json={"prompt": "ambient pads", "sample_count": 3})

    assert response.status_code == 200
    assert len(response.json()["data"]["tracks"]) == 3


def test_invalid_location_is_400(client, registry):
    response = client.post(
        "/api/v1/image/generate",
        json={"prompt": "kite", "output_uri": "ftp://host/kite.png"},
    )

    assert response.status_code == 400
    assert response.json()["data"]["error"] == "invalid_location"
    assert registry.resolve("image").calls == []


def test_exhausted_polling_is_504(client, registry):
    from core.exceptions import OperationTimeoutError
    from tests.helpers import FakeVideoProvider

    class StuckVideoProvider(FakeVideoProvider):
        async def _generate(self, request, model):
            raise OperationTimeoutError("projects/p/operations/42", attempts=3, waited_seconds=7.0)

    registry.register("video", "stuck", StuckVideoProvider("stuck"))

    response = client.post("/api/v1/video/generate", json={"prompt": "x", "provider": "stuck"})

    assert response.status_code == 504
    context = response.json()["data"]["context"]
    assert context["timed_out"] is True
    assert context["operation"] == "projects/p/operations/42"


def test_upscale_stores_result(client, gcs):
    response = client.post(
        "/api/v1/image/upscale",
        json={"image_uri": "gs://bucket/in/frame.png", "output_uri": "gs://bucket/out/frame@2x.png"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["upscale_factor"] == "x2"
    assert data["images"][0]["uri"] == "gs://bucket/out/frame@2x.png"
    assert gcs.objects["gs://bucket/out/frame@2x.png"] == b"upscaled-\x89PNG-frame"


def test_upscale_invalid_factor_is_400(client, gcs):
    response = client.post("/api/v1/image/upscale", json={"image_uri": "gs://bucket/in/frame.png", "upscale_factor": "x3"})

    assert response.status_code == 400
    assert response.json()["data"]["context"]["field"] == "upscale_factor"
    assert gcs.downloads == 0


def test_video_extend(client, registry):
    response = client.post(
        "/api/v1/video/extend",
        json={"prompt": "the kite keeps climbing", "video_uri": "gs://bucket/in/clip.mp4", "duration_seconds": 8},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["mode"] == "extend"
    assert base64.b64decode(data["videos"][0]["data_base64"]) == b"extended-mp4"
    assert registry.resolve("video").calls[0].duration_seconds == 8


def test_video_extend_bad_duration_is_400(client, registry):
    response = client.post(
        "/api/v1/video/extend",
        json={"prompt": "more", "video_uri": "gs://bucket/in/clip.mp4", "duration_seconds": 5},
    )

    assert response.status_code == 400
    assert registry.resolve("video").calls == []

"""Google Cloud project settings and REST endpoints."""

from __future__ import annotations

import os

PROJECT_ID = os.getenv("PROJECT_ID", "")
LOCATION = os.getenv("LOCATION", "us-central1")
GCS_BUCKET = os.getenv("GCS_BUCKET", "")

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
STORAGE_READ_WRITE_SCOPE = "https://www.googleapis.com/auth/devstorage.read_write"
STORAGE_READ_ONLY_SCOPE = "https://www.googleapis.com/auth/devstorage.read_only"

# Vertex AI publisher model endpoints; formatted with location/project/model
VERTEX_MODEL_ENDPOINT = (
    "https://{location}-aiplatform.googleapis.com/v1/projects/{project}"
    "/locations/{location}/publishers/google/models/{model}"
)

TEXT_TO_SPEECH_BASE_URL = "https://texttospeech.googleapis.com/v1"
STORAGE_API_BASE_URL = "https://storage.googleapis.com"

HTTP_TIMEOUT_SECONDS = 120.0

__all__ = [
    "CLOUD_PLATFORM_SCOPE",
    "GCS_BUCKET",
    "HTTP_TIMEOUT_SECONDS",
    "LOCATION",
    "PROJECT_ID",
    "STORAGE_API_BASE_URL",
    "STORAGE_READ_ONLY_SCOPE",
    "STORAGE_READ_WRITE_SCOPE",
    "TEXT_TO_SPEECH_BASE_URL",
    "VERTEX_MODEL_ENDPOINT",
]

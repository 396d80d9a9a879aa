"""AWS settings for the S3 storage backend."""

from __future__ import annotations

import os

AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
S3_BUCKET = os.getenv("S3_BUCKET", "")
# botocore "standard" retry mode attempts, including the first call
S3_MAX_ATTEMPTS = int(os.getenv("S3_MAX_ATTEMPTS", "3"))
S3_PRESIGN_MAX_SECONDS = 7 * 24 * 3600

__all__ = [
    "AWS_REGION",
    "S3_BUCKET",
    "S3_MAX_ATTEMPTS",
    "S3_PRESIGN_MAX_SECONDS",
]

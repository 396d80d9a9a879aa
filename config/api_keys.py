"""Static AWS credentials for the S3 client.

Google credentials come from Application Default Credentials
(``core.auth.tokens``); SDK keys for Gemini and OpenAI are read into
``core.config.Settings``. Only the optional AWS key pair lives here: when it
is unset boto3 walks its default chain (environment, shared config, instance
role).
"""

from __future__ import annotations

import os
from typing import Dict, Optional


def aws_credentials() -> Dict[str, Optional[str]]:
    """Keyword arguments for ``boto3.client``; both ``None`` when not configured."""

    access_key = os.getenv("AWS_ACCESS_KEY_ID", "").strip()
    secret_key = os.getenv("AWS_SECRET_ACCESS_KEY", "").strip()
    if not (access_key and secret_key):
        return {"aws_access_key_id": None, "aws_secret_access_key": None}
    return {"aws_access_key_id": access_key, "aws_secret_access_key": secret_key}


__all__ = ["aws_credentials"]

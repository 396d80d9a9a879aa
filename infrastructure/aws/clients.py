"""Initialise AWS service clients used by the infrastructure layer."""

from __future__ import annotations

import logging
from typing import Any, Dict

import boto3
from botocore.config import Config as BotoConfig

from config.api_keys import aws_credentials
from config.aws import AWS_REGION, S3_MAX_ATTEMPTS

logger = logging.getLogger(__name__)

aws_clients: Dict[str, Any] = {}


def _boto_config(region: str) -> BotoConfig:
    return BotoConfig(
        region_name=region,
        retries={"max_attempts": S3_MAX_ATTEMPTS, "mode": "standard"},
        connect_timeout=10,
        read_timeout=60,
    )


def _build_client(service_name: str, region: str) -> Any:
    return boto3.client(service_name, config=_boto_config(region), **aws_credentials())


def get_s3_client(region: str | None = None) -> Any:
    """Return the cached S3 client, creating it on first use."""

    client = aws_clients.get("s3")
    if client is None:
        client = _build_client("s3", region or AWS_REGION)
        aws_clients["s3"] = client
        logger.info("Initialised S3 client (region=%s)", region or AWS_REGION)
    return client


__all__ = ["aws_clients", "get_s3_client"]

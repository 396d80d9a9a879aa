"""AWS client helpers."""

from .clients import aws_clients, get_s3_client

__all__ = ["aws_clients", "get_s3_client"]

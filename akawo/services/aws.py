"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3

from akawo.config.settings import AwsConfig, settings


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    aws: AwsConfig | None = None,
) -> Any:
    """Instantiate a boto3 client using configured credentials if available.

    Without explicit keys boto3 falls back to its default credential chain
    (environment, shared config, instance role).
    """

    aws = aws or settings.aws
    client_kwargs: dict[str, Any] = {"region_name": region_name or aws.region}
    if aws.access_key and aws.secret_key:
        client_kwargs["aws_access_key_id"] = aws.access_key
        client_kwargs["aws_secret_access_key"] = aws.secret_key
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]

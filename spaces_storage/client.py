"""boto3 client construction for S3-compatible endpoints."""

from __future__ import annotations

from typing import Any

from botocore.config import Config
from botocore.exceptions import ClientError

from spaces_storage.config import Settings


def create_s3_client(
    endpoint: str,
    access_key: str,
    secret_key: str,
    *,
    settings: Settings | None = None,
) -> Any:
    """Build an S3 client signing with SigV4 and virtual-hosted bucket URLs."""
    import boto3

    settings = settings or Settings()
    return boto3.client(
        "s3",
        region_name=settings.signing_region,
        endpoint_url=endpoint.rstrip("/"),
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "virtual"},
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            retries={"max_attempts": settings.max_attempts},
            # Spaces does not accept flexible checksum headers.
            request_checksum_calculation="when_required",
            response_checksum_validation="when_required",
        ),
    )


def client_error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", "") or "")

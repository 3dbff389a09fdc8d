"""
S3 object storage – upload, delete, presigned uploads and public URLs.
"""
import logging
from typing import Optional

from app.aws.client import get_aws_client
from app.core.config import settings

logger = logging.getLogger(__name__)


def get_s3_client():
    """S3 client for the configured region."""
    return get_aws_client("s3", region_name=settings.s3_region)


def _bucket(bucket: Optional[str]) -> str:
    b = bucket or settings.S3_BUCKET_NAME
    if not b:
        raise ValueError("S3_BUCKET_NAME not configured")
    return b


def build_public_url(key: str, bucket: Optional[str] = None) -> str:
    """Build public URL for an S3 object (bucket must allow public read)."""
    b = bucket or settings.S3_BUCKET_NAME
    return f"https://{b}.s3.{settings.s3_region}.amazonaws.com/{key}"


def key_from_url(url: Optional[str], bucket: Optional[str] = None) -> Optional[str]:
    """Inverse of build_public_url. None when the URL is not in our bucket."""
    if not url:
        return None
    prefix = build_public_url("", bucket=bucket)
    if not url.startswith(prefix):
        return None
    return url[len(prefix):] or None


def upload_to_s3(
    key: str,
    body: bytes,
    content_type: str,
    bucket: Optional[str] = None,
) -> str:
    """
    Upload bytes to S3 and return the object URL.

    Does not use ACLs (avoids AccessControlListNotSupported on buckets with
    "Bucket owner enforced" ownership). Public read comes from the bucket policy.

    Args:
        key: S3 object key (e.g. users/<id>/avatar.jpg)
        body: File bytes
        content_type: MIME type (e.g. image/jpeg)
        bucket: Override bucket; defaults to settings.S3_BUCKET_NAME

    Returns:
        Full URL to the object (https://bucket.s3.region.amazonaws.com/key).
    """
    b = _bucket(bucket)
    get_s3_client().put_object(
        Bucket=b,
        Key=key,
        Body=body,
        ContentType=content_type,
    )
    url = build_public_url(key, bucket=b)
    logger.info("Uploaded S3 key=%s -> %s", key, url)
    return url


def delete_from_s3(key: str, bucket: Optional[str] = None) -> None:
    """Delete one object. S3 treats a missing key as success."""
    b = _bucket(bucket)
    get_s3_client().delete_object(Bucket=b, Key=key)
    logger.info("Deleted S3 key=%s", key)


def presigned_upload_url(
    key: str,
    content_type: str,
    expires_in: Optional[int] = None,
    bucket: Optional[str] = None,
) -> str:
    """Presigned PUT URL; the client must send the same Content-Type."""
    b = _bucket(bucket)
    return get_s3_client().generate_presigned_url(
        "put_object",
        Params={"Bucket": b, "Key": key, "ContentType": content_type},
        ExpiresIn=expires_in or settings.S3_PRESIGNED_EXPIRES,
    )

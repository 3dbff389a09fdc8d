"""
boto3 client factory shared by the S3, Cognito and Secrets Manager wrappers.
"""
import boto3
from typing import Optional
from app.core.config import settings


def get_aws_client(service_name: str, region_name: Optional[str] = None):
    """
    boto3 client for `service_name` ("s3", "cognito-idp", ...).

    Region falls back to AWS_REGION. Credentials come from the default
    provider chain (env, profile or the task role).
    """
    return boto3.client(service_name, region_name=region_name or settings.AWS_REGION)

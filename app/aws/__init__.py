"""
AWS integrations: Cognito auth, S3 media storage, Secrets Manager bootstrap.
"""
from app.aws.client import get_aws_client
from app.aws.cognito import CognitoIdentityProviderWrapper
from app.aws.s3 import build_public_url, delete_from_s3, key_from_url, presigned_upload_url, upload_to_s3
from app.aws.secrets import get_secret

__all__ = [
    "get_aws_client",
    "CognitoIdentityProviderWrapper",
    "build_public_url",
    "delete_from_s3",
    "key_from_url",
    "presigned_upload_url",
    "upload_to_s3",
    "get_secret",
]

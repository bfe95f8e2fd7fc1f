"""S3 client construction from application settings."""
import logging
import os

import boto3
from mypy_boto3_s3 import S3Client

from storage_api.config.settings import Settings

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> S3Client:
    """Create an S3 client for the configured region, credentials and endpoint."""
    client_kwargs = {
        "region_name": settings.aws_region,
    }

    # Check for AWS profile in environment (for SSO)
    aws_profile = os.environ.get("AWS_PROFILE")
    if aws_profile and not settings.is_local:
        session = boto3.Session(profile_name=aws_profile)
        logger.debug(f"Created s3 client using profile: {aws_profile}")
        return session.client("s3", region_name=settings.aws_region)

    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_endpoint_url:
        client_kwargs["endpoint_url"] = settings.aws_endpoint_url

    logger.info("Creating s3 client")
    logger.info(f"  Mode: {settings.deployment_mode}")
    logger.info(f"  Region: {settings.aws_region}")
    logger.info(f"  Endpoint: {settings.aws_endpoint_url}")
    return boto3.client("s3", **client_kwargs)

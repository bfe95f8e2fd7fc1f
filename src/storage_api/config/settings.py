# src/storage_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from storage_api.gateway import BucketConfig

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
LOCAL_DEPLOYMENT_MODES = ["local-dev", "aws-mock"]
MOTO_SERVER_ENDPOINT = "http://localhost:5000"


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from storage_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="storage-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="storage-service-files",
        description="The bucket every file of this service lives in"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        description="Public URL of the bucket root, e.g. a CDN in front of it"
    )

    s3_list_page_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="MaxKeys requested per ListObjectsV2 page"
    )

    # HTTP
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of CORS origins"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @model_validator(mode="after")
    def apply_local_mode_defaults(self) -> Self:
        """Point local modes at a moto server with mock credentials unless told otherwise."""
        if self.deployment_mode in LOCAL_DEPLOYMENT_MODES:
            if self.aws_endpoint_url is None:
                self.aws_endpoint_url = MOTO_SERVER_ENDPOINT
            if self.aws_access_key_id is None:
                self.aws_access_key_id = "mock"
            if self.aws_secret_access_key is None:
                self.aws_secret_access_key = "mock"
        return self

    @property
    def is_local(self) -> bool:
        return self.deployment_mode in LOCAL_DEPLOYMENT_MODES

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def bucket_config(self) -> BucketConfig:
        """Build the immutable bucket configuration handed to the storage gateway."""
        return BucketConfig(
            bucket_name=self.s3_bucket_name,
            region=self.aws_region,
            endpoint_url=self.aws_endpoint_url,
            public_base_url=self.public_base_url,
            list_page_size=self.s3_list_page_size,
        )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()

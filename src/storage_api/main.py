import logging
from textwrap import dedent
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from mypy_boto3_s3 import S3Client

from storage_api.aws_clients import create_s3_client
from storage_api.config.settings import Settings
from storage_api.errors import (
    StorageError,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
    handle_storage_errors,
)
from storage_api.gateway import StorageGateway
from storage_api.routers.files import router as files_router
from storage_api.routers.health import router as health_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, s3_client: Optional[S3Client] = None) -> FastAPI:
    """Create a FastAPI application.

    :param settings: Application settings. Read from the environment when omitted.
    :param s3_client: S3 client shared by every request. Built from ``settings`` when omitted.
    """
    settings = settings or Settings()
    s3_client = s3_client or create_s3_client(settings)

    app = FastAPI(
        title="Storage API",
        summary="Upload, download, list and delete files in an S3 bucket",
        version="v1",  # a fancier version would read the semver from pkg metadata
        description=dedent(
            """\
        Files are addressed by their public URL. Uploads get a unique key of the
        form `<uuid>_<filename>`; every other route takes the URL returned by an upload.

        | Helpful Links | Notes |
        | --- | --- |
        | [FastAPI Documentation](https://fastapi.tiangolo.com/) | |
        | [S3 API Reference](https://docs.aws.amazon.com/AmazonS3/latest/API/Welcome.html) | |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.gateway = StorageGateway(settings.bucket_config(), s3_client)
    logger.info(f"Serving bucket {settings.s3_bucket_name} at {app.state.gateway.base_url}")

    app.include_router(files_router, prefix="/files", tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=StorageError,
        handler=handle_storage_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(level=settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host="0.0.0.0", port=8000)

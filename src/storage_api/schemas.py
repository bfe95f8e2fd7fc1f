####################################
# --- Request/response schemas --- #
####################################

from typing import Optional

from pydantic import BaseModel, Field

EXAMPLE_FILE_URL = "https://storage-service-files.s3.us-east-1.amazonaws.com/0b6f2a52-9c1e-4d2b-a3f1-5d7e1c0a9b11_My_Report.pdf"

FILE_DELETED_MESSAGE = "File deleted successfully."
FILES_DELETED_MESSAGE = "Files deleted successfully."


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response raised by the storage gateway."""
    detail: str = Field(
        description="What went wrong.",
        json_schema_extra={"example": "File not found: " + EXAMPLE_FILE_URL},
    )


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str = Field(description="`ok` when the API is serving requests.")
    deployment_mode: str
    bucket: str = Field(description="The bucket this API serves.")
    base_url: Optional[str] = Field(None, description="Public URL prefix of every file.")

from fastapi import APIRouter, Depends, Request

from storage_api.config.settings import Settings
from storage_api.dependencies import get_storage_gateway
from storage_api.gateway import StorageGateway
from storage_api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, gateway: StorageGateway = Depends(get_storage_gateway)):
    """
    Health check endpoint for monitoring API status.

    Returns the deployment mode and the bucket this instance serves. The bucket
    itself is not contacted.
    """
    settings: Settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        deployment_mode=settings.deployment_mode,
        bucket=gateway.bucket_name,
        base_url=gateway.base_url,
    )

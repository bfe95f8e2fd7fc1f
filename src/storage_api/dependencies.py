from fastapi import Request

from storage_api.gateway import StorageGateway


def get_storage_gateway(request: Request) -> StorageGateway:
    """Storage gateway dependency."""
    return request.app.state.gateway

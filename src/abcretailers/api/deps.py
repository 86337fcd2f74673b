"""FastAPI dependency providers."""

from typing import Annotated

from fastapi import Depends

from ..adapters.storage import AzureStorageGateway, get_storage_gateway


def get_gateway() -> AzureStorageGateway:
    """Get the process-wide storage gateway."""
    return get_storage_gateway()


# Dependency annotations for FastAPI
GatewayDep = Annotated[AzureStorageGateway, Depends(get_gateway)]

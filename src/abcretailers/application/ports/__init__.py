"""Ports (interfaces) the application layer depends on."""

from .storage_gateway import StorageGateway

__all__ = ["StorageGateway"]

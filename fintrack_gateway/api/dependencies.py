"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from fintrack_gateway.infrastructure.clients.storage import StorageClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_storage_client() -> StorageClient:
    """Provide object storage client instance"""
    return StorageClient()

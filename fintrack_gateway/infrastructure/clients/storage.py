"""Object storage HTTP client for receipt uploads"""

import httpx
from typing import Optional
from fintrack_gateway.domain.exceptions import StorageError
from fintrack_gateway.config import settings
from fintrack_gateway.infrastructure.observability.metrics import storage_upload_failures_counter


class StorageClient:
    """Client for the document bucket (upload + public URL)"""

    def __init__(
        self,
        base_url: str | None = None,
        bucket: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.storage_api_base).rstrip("/")
        self.bucket = bucket or settings.storage_bucket
        self.api_key = api_key if api_key is not None else settings.storage_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """
        Upload bytes to the bucket and resolve their public URL.

        Raises:
            StorageError: On timeout, HTTP errors, or network failure
        """
        headers = {"Content-Type": content_type}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
                    content=content,
                    headers=headers,
                )
                response.raise_for_status()

            except httpx.TimeoutException as e:
                storage_upload_failures_counter.inc()
                raise StorageError(f"Storage upload timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                storage_upload_failures_counter.inc()
                raise StorageError(f"Storage upload error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                storage_upload_failures_counter.inc()
                raise StorageError(f"Storage unreachable: {e}") from e

        return self.get_public_url(path)

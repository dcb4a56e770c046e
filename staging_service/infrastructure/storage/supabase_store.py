"""Supabase Storage Artifact Store - Infrastructure Layer"""

import logging
from typing import Optional
from uuid import uuid4

import httpx

from ...domain.entity.errors import StorageError
from ...domain.repository.artifact_store import RESULTS, ArtifactStore, extension_for

logger = logging.getLogger(__name__)


class SupabaseArtifactStore(ArtifactStore):
    """Supabase Storage (对象存储) 实现

    Objects are uploaded to a public bucket; the returned reference is the
    public object URL, resolvable by anyone holding it.
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        bucket: str = "staging",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url.rstrip("/")
        self._bucket = bucket
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }

    def public_url(self, path: str) -> str:
        return f"{self._url}/storage/v1/object/public/{self._bucket}/{path}"

    async def put(self, data: bytes, mime_type: str, category: str = RESULTS) -> str:
        path = f"{category}/{uuid4().hex}.{extension_for(mime_type)}"
        headers = dict(self._headers)
        headers["Content-Type"] = mime_type
        headers["x-upsert"] = "false"

        try:
            response = await self._client.post(
                f"{self._url}/storage/v1/object/{self._bucket}/{path}",
                content=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Upload of {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                f"Supabase upload failed: status={response.status_code}, body={response.text[:200]}"
            )
            raise StorageError(f"Upload of {path} failed with status {response.status_code}")

        return self.public_url(path)

    async def close(self) -> None:
        await self._client.aclose()

"""Staging SDK Client

Talks to the staging HTTP API.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .types import StageImage, StageResult, StyleInfo

logger = logging.getLogger(__name__)


class StagingAPIError(Exception):
    """Raised for non-2xx responses."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class StagingClient:
    """Staging service client.

    Usage:
        client = StagingClient("http://localhost:8080")

        result = client.stage(
            [StageImage.from_path("living-room.jpg")],
            style_id="scandinavian",
        )
        for image in result.results:
            for v in image.variations:
                print(v.variation_index, v.artifact_ref or v.error_kind)

        # Async
        result = await client.astage(images, custom_prompt="add a reading nook")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        api_key: Optional[str] = None,
        timeout: float = 180.0,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._async_transport = async_transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _body(
        images: Sequence[StageImage],
        style_id: Optional[str],
        custom_prompt: Optional[str],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"images": [image.to_payload() for image in images]}
        if style_id:
            body["styleId"] = style_id
        if custom_prompt:
            body["customPrompt"] = custom_prompt
        return body

    @staticmethod
    def _check(response: httpx.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise StagingAPIError(response.status_code, message)
        return response.json()

    # --- Synchronous API ---

    def stage(
        self,
        images: Sequence[StageImage],
        style_id: Optional[str] = None,
        custom_prompt: Optional[str] = None,
    ) -> StageResult:
        """Submit a batch and wait for the staged results."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.post(
                f"{self.base_url}/api/stage",
                json=self._body(images, style_id, custom_prompt),
                headers=self._headers(),
            )
        return StageResult.from_json(self._check(resp))

    def list_styles(self) -> List[StyleInfo]:
        """List available styles."""
        with httpx.Client(timeout=30, transport=self._transport) as client:
            resp = client.get(f"{self.base_url}/api/styles", headers=self._headers())
        data = self._check(resp)
        return [
            StyleInfo(
                id=s["id"],
                name=s.get("name", s["id"]),
                description=s.get("description", ""),
                emoji=s.get("emoji", ""),
            )
            for s in data.get("styles", [])
        ]

    def health(self) -> bool:
        """Check if the server is healthy."""
        try:
            with httpx.Client(timeout=5, transport=self._transport) as client:
                resp = client.get(f"{self.base_url}/health")
                return resp.status_code == 200
        except httpx.HTTPError:
            return False

    # --- Async API ---

    async def astage(
        self,
        images: Sequence[StageImage],
        style_id: Optional[str] = None,
        custom_prompt: Optional[str] = None,
    ) -> StageResult:
        """Submit a batch asynchronously."""
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._async_transport
        ) as client:
            resp = await client.post(
                f"{self.base_url}/api/stage",
                json=self._body(images, style_id, custom_prompt),
                headers=self._headers(),
            )
        return StageResult.from_json(self._check(resp))

"""OpenAI Image Edit Generation Client - Infrastructure Layer"""

import asyncio
import base64
import binascii
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from ...domain.entity.errors import (
    UpstreamEmptyResponseError,
    UpstreamMalformedResponseError,
    UpstreamNoImageError,
    UpstreamRejectedError,
    UpstreamTimeoutError,
)
from ...domain.entity.staging import GeneratedImage
from ...domain.repository.artifact_store import extension_for
from ...domain.repository.generation_client import GenerationClient, time_left

logger = logging.getLogger(__name__)


class OpenAIGenerationClient(GenerationClient):
    """OpenAI 图像编辑客户端实现

    Uses ``images.edit`` with the source photo; the endpoint returns image data
    only, so results never carry a caption.
    """

    SUPPORTED_MODELS = [
        "gpt-image-1",
        "gpt-image-1-mini",
    ]

    DEFAULT_MODEL = "gpt-image-1"

    def __init__(
        self,
        api_key: str = "",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        output_format: str = "png",
        client: Optional[Any] = None,
    ):
        """初始化 OpenAI 客户端"""
        self._model = model or self.DEFAULT_MODEL
        self._output_format = output_format
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    def supports_model(self, model: str) -> bool:
        """检查是否支持指定模型"""
        return model in self.SUPPORTED_MODELS

    async def generate(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        deadline: float,
    ) -> GeneratedImage:
        remaining = time_left(deadline)
        if remaining <= 0:
            raise UpstreamTimeoutError("Deadline passed before the request was sent")

        logger.info(
            f"[OpenAI] Sending image edit: model={self._model}, imageSize={len(image_bytes)} bytes"
        )
        filename = f"source.{extension_for(mime_type)}"

        try:
            response = await asyncio.wait_for(
                self._client.images.edit(
                    model=self._model,
                    image=(filename, image_bytes, mime_type),
                    prompt=prompt,
                    n=1,
                    output_format=self._output_format,
                ),
                timeout=remaining,
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError(f"Generation did not finish within {remaining:.1f}s")
        except openai.APITimeoutError as e:
            raise UpstreamTimeoutError(f"OpenAI request timed out: {e}") from e
        except openai.APIStatusError as e:
            logger.error(f"[OpenAI] API call failed: status={e.status_code}, message={e.message}")
            raise UpstreamRejectedError(
                f"OpenAI API error {e.status_code}: {e.message}",
                transient=e.status_code == 429 or e.status_code >= 500,
            ) from e
        except openai.APIConnectionError as e:
            raise UpstreamRejectedError(f"OpenAI connection failed: {e}", transient=True) from e

        data = getattr(response, "data", None)
        if not data:
            raise UpstreamEmptyResponseError("No response from the generation service")

        payload = getattr(data[0], "b64_json", None)
        if not payload:
            raise UpstreamNoImageError("No image in generation response")

        try:
            decoded = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UpstreamMalformedResponseError(
                f"Image payload is not valid base64: {e}"
            ) from e

        return GeneratedImage(data=decoded, mime_type=f"image/{self._output_format}")

    async def close(self) -> None:
        await self._client.close()

"""Gemini Generation Client - Infrastructure Layer"""

import asyncio
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ...domain.entity.errors import UpstreamRejectedError, UpstreamTimeoutError
from ...domain.entity.staging import GeneratedImage
from ...domain.repository.generation_client import GenerationClient, time_left
from .response_parser import parse_generation_response

logger = logging.getLogger(__name__)


class GeminiGenerationClient(GenerationClient):
    """Gemini 多模态生成客户端实现

    A single ``genai.Client`` is created up front and shared by all
    concurrent calls; it holds no per-request state.
    """

    # 支持的模型列表
    SUPPORTED_MODELS = [
        "gemini-3-pro-image-preview",
        "gemini-2.5-flash-image",
        "gemini-2.5-flash-image-preview",
    ]

    DEFAULT_MODEL = "gemini-3-pro-image-preview"

    def __init__(
        self,
        api_key: str = "",
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """初始化 Gemini 客户端

        Args:
            api_key: API 密钥
            model: 模型名称
            base_url: API 基础 URL（可选）
            client: 预先构建的 genai.Client（测试时注入）
        """
        self._model = model or self.DEFAULT_MODEL
        if client is not None:
            self._client = client
        else:
            http_options = types.HttpOptions(base_url=base_url) if base_url else None
            self._client = genai.Client(api_key=api_key, http_options=http_options)

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
            f"[Gemini] Sending request: model={self._model}, "
            f"imageSize={len(image_bytes)} bytes, mimeType={mime_type}"
        )

        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                ],
            )
        ]
        config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])

        try:
            # wait_for 超时会取消进行中的 HTTP 请求
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self._model,
                    contents=contents,
                    config=config,
                ),
                timeout=remaining,
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError(
                f"Generation did not finish within {remaining:.1f}s"
            )
        except genai_errors.APIError as e:
            logger.error(f"[Gemini] API call failed: code={e.code}, message={e.message}")
            raise UpstreamRejectedError(
                f"Gemini API error {e.code}: {e.message}",
                transient=_is_transient(e.code),
            ) from e
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Gemini request timed out: {e}") from e
        except httpx.TransportError as e:
            logger.error(f"[Gemini] Connection failed: {e}")
            raise UpstreamRejectedError(f"Gemini connection failed: {e}", transient=True) from e

        candidate_count = len(response.candidates or []) if response is not None else 0
        logger.info(f"[Gemini] Response received, candidates: {candidate_count}")
        return parse_generation_response(response)


def _is_transient(code: Optional[int]) -> bool:
    return code == 429 or (code is not None and code >= 500)

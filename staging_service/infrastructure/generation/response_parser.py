"""Multimodal response normalization.

Works on anything shaped like a ``generate_content`` response
(``candidates[].content.parts[]`` with ``text`` or ``inline_data``), so the
checks can run against plain objects in tests.
"""

import base64
import binascii
import logging
from typing import Any, List, Optional

from ...domain.entity.errors import (
    UpstreamEmptyResponseError,
    UpstreamMalformedResponseError,
    UpstreamNoImageError,
)
from ...domain.entity.staging import GeneratedImage

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"


def parse_generation_response(response: Any) -> GeneratedImage:
    """Extract the first inline image and the text caption from a response.

    Raises:
        UpstreamEmptyResponseError: no candidate returned
        UpstreamMalformedResponseError: first candidate has no content parts
        UpstreamNoImageError: no inline image payload in any part
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise UpstreamEmptyResponseError("No response from the generation service")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        raise UpstreamMalformedResponseError(
            f"No content parts in response (finish_reason={finish_reason})"
        )

    image: Optional[GeneratedImage] = None
    texts: List[str] = []
    for part in parts:
        # 思考过程不作为说明文字
        if getattr(part, "thought", False):
            continue
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            if image is None:
                image = GeneratedImage(
                    data=_decode(inline.data),
                    mime_type=getattr(inline, "mime_type", None) or DEFAULT_IMAGE_MIME_TYPE,
                )
            continue
        text = getattr(part, "text", None)
        if text:
            texts.append(text)

    if image is None:
        logger.debug(f"Response contained only text: {' '.join(texts)[:200]}")
        raise UpstreamNoImageError("No image in generation response")

    caption = "\n".join(texts).strip() or None
    return GeneratedImage(data=image.data, mime_type=image.mime_type, caption=caption)


def _decode(data) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UpstreamMalformedResponseError(
            f"Inline image payload is not valid base64: {e}"
        ) from e

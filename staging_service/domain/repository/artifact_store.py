"""Artifact Store Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod

UPLOADS = "uploads"
RESULTS = "results"

_EXTENSION_OVERRIDES = {"jpeg": "jpg", "svg+xml": "svg"}


def extension_for(mime_type: str) -> str:
    """image/jpeg -> jpg, unknown -> png"""
    subtype = mime_type.split("/", 1)[1] if "/" in mime_type else ""
    subtype = subtype.split(";", 1)[0].strip().lower()
    if not subtype:
        return "png"
    return _EXTENSION_OVERRIDES.get(subtype, subtype)


class ArtifactStore(ABC):
    """产物存储接口"""

    @abstractmethod
    async def put(self, data: bytes, mime_type: str, category: str = RESULTS) -> str:
        """保存字节并返回可独立解析的引用 (例如 URL)

        Args:
            data: 图片字节
            mime_type: MIME 类型
            category: 分类目录 (uploads / results)

        Returns:
            产物引用

        Raises:
            StorageError: 保存失败
        """
        pass

    async def close(self) -> None:
        return None

"""Generation Client Repository Interface - Domain Layer"""

import asyncio
from abc import ABC, abstractmethod

from ..entity.staging import GeneratedImage


def time_left(deadline: float) -> float:
    """Seconds remaining until ``deadline`` on the running loop's clock."""
    return deadline - asyncio.get_running_loop().time()


class GenerationClient(ABC):
    """上游生成服务接口（遵循依赖倒置原则）

    定义在领域层，实现在基础设施层。实现不做重试，也不了解批处理。
    """

    @abstractmethod
    async def generate(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        deadline: float,
    ) -> GeneratedImage:
        """对一张图片执行一次生成请求

        Args:
            image_bytes: 原图字节
            mime_type: 原图 MIME 类型
            prompt: 完整提示词
            deadline: 事件循环时钟上的绝对截止时间 (loop.time())

        Returns:
            生成的图片及可选说明文字

        Raises:
            UpstreamEmptyResponseError: 没有候选结果
            UpstreamMalformedResponseError: 候选结果没有内容
            UpstreamNoImageError: 只有文本，没有图片
            UpstreamTimeoutError: 超过截止时间
            UpstreamRejectedError: 服务拒绝或不可达
        """
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """使用的模型名称"""
        pass

    async def close(self) -> None:
        """释放底层连接"""
        return None

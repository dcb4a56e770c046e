"""Style Catalog Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entity.staging import StyleDefinition


class StyleCatalog(ABC):
    """风格目录接口"""

    @abstractmethod
    def get_style(self, style_id: str) -> Optional[StyleDefinition]:
        """获取风格

        Args:
            style_id: 风格ID

        Returns:
            风格定义或 None (找不到不是错误)
        """
        pass

    @abstractmethod
    def list_styles(self) -> List[StyleDefinition]:
        """列出所有风格"""
        pass

    @abstractmethod
    def register_style(self, style: StyleDefinition) -> None:
        """注册风格"""
        pass

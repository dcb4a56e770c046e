"""Identity Resolver Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod

from ..entity.staging import CallerIdentity


class IdentityResolver(ABC):
    """身份解析接口"""

    @abstractmethod
    async def resolve(self, token: str) -> CallerIdentity:
        """将 bearer token 解析为调用方身份

        Raises:
            AuthenticationError: token 无效或已过期
        """
        pass

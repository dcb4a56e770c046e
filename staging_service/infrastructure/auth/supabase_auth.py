"""Supabase Identity Resolver - Infrastructure Layer"""

import logging
from typing import Optional

import httpx

from ...domain.entity.errors import AuthenticationError
from ...domain.entity.staging import CallerIdentity
from ...domain.repository.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)


class SupabaseIdentityResolver(IdentityResolver):
    """通过 Supabase Auth 验证用户 JWT"""

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url.rstrip("/")
        self._anon_key = anon_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def resolve(self, token: str) -> CallerIdentity:
        if not token:
            raise AuthenticationError("Unauthorized - please refresh page")

        try:
            response = await self._client.get(
                f"{self._url}/auth/v1/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self._anon_key,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase auth request failed: {e}")
            raise AuthenticationError("Unable to verify credentials") from e

        if response.status_code != 200:
            logger.info(f"Rejected token: status={response.status_code}")
            raise AuthenticationError("Unauthorized - please refresh page")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Supabase auth returned a non-JSON body: {e}")
            raise AuthenticationError("Unable to verify credentials") from e

        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise AuthenticationError("Unauthorized - please refresh page")

        return CallerIdentity(user_id=user_id, email=data.get("email"))

    async def close(self) -> None:
        await self._client.aclose()

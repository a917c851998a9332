import asyncio
import json as jsonlib
from typing import Any

import aiohttp

from ..dns.dns import AddressFamily

DEFAULT_IPV4_URL = "https://api.ipify.org?format=json"
DEFAULT_IPV6_URL = "https://api6.ipify.org?format=json"


class PublicIPError(Exception):
    pass


class PublicIPTransportError(PublicIPError):
    pass


class PublicIPStatusError(PublicIPError):
    def __init__(self, status: int) -> None:
        super().__init__(f"failed to get public ip, status code: {status}")
        self.status = status


class PublicIPResponseError(PublicIPError):
    pass


class PublicIPClient:
    def __init__(
        self,
        ipv4_url: str = DEFAULT_IPV4_URL,
        ipv6_url: str = DEFAULT_IPV6_URL,
        timeout: float = 5,
    ) -> None:
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout)
        )

        self._urls = {
            AddressFamily.V4: ipv4_url,
            AddressFamily.V6: ipv6_url,
        }

    async def close(self):
        await self._session.close()

    async def _get_json(self, url: str) -> Any:
        try:
            async with self._session.get(url) as response:
                if response.status != 200:
                    raise PublicIPStatusError(response.status)
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PublicIPTransportError(f"failed to reach {url}: {e!r}") from e

        try:
            return jsonlib.loads(body)
        except ValueError as e:
            raise PublicIPResponseError(f"response from {url} is not json") from e

    async def get_public_ip(self, family: AddressFamily) -> str:
        """
        :raises PublicIPTransportError: if the service can't be reached
        :raises PublicIPStatusError: if the service doesn't answer with 200
        :raises PublicIPResponseError: if there is no ip in the response
        """
        url = self._urls[family]
        result = await self._get_json(url)

        ip = result.get("ip") if isinstance(result, dict) else None
        if not isinstance(ip, str) or not ip:
            raise PublicIPResponseError(f"public ip not found in response from {url}")

        return ip

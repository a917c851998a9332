import asyncio
import functools
from typing import Any, Callable, Protocol, TypedDict, cast

import ovh  # type: ignore
from ovh.exceptions import APIError  # type: ignore

from ..logger import logger
from .dns import RecordIdListT, RecordIdT, ZoneClient, ZoneClientError, ZoneRecordT


# --- GET /domain/zone/{zoneName}/record/{id} ---
class OVHRecordT(TypedDict):
    id: int
    zone: str
    fieldType: str
    subDomain: str
    target: str
    ttl: int


class OVHApiClient(Protocol):
    def get(self, _target: str, _need_auth: bool = True, **kwargs: Any) -> Any: ...

    def post(self, _target: str, _need_auth: bool = True, **kwargs: Any) -> Any: ...

    def put(self, _target: str, _need_auth: bool = True, **kwargs: Any) -> Any: ...


class OVHZoneClient(ZoneClient):
    """
    ovh zone client, wraps the synchronous ovh sdk
    """

    retry_delay: float = 1

    def __init__(
        self,
        domain: str,
        endpoint: str,
        application_key: str,
        application_secret: str,
        consumer_key: str,
        timeout: float = 5,
    ) -> None:
        """
        :raises ovh.exceptions.InvalidRegion: if the endpoint is not a known ovh endpoint
        """
        self._domain = domain
        ovh_client = ovh.Client(
            endpoint=endpoint,
            application_key=application_key,
            application_secret=application_secret,
            consumer_key=consumer_key,
            timeout=timeout,
        )
        self._api = cast(OVHApiClient, ovh_client)

    def set_api_client(self, api: OVHApiClient):
        """
        only swaps the underlying sdk client
        for test purposes
        """
        self._api = api

    def get_domain(self) -> str:
        return self._domain

    def _zone_path(self, suffix: str = "") -> str:
        return f"/domain/zone/{self._domain}{suffix}"

    async def _try_request(
        self,
        request_callable: Callable[..., Any],
        path: str,
        retry_times: int = 1,
        **kwargs: Any,
    ) -> Any:
        """
        try to call api for retry_times times
        :raises ZoneClientError: if failed to call api for retry_times times
        """
        loop = asyncio.get_running_loop()
        call = functools.partial(request_callable, path, **kwargs)
        for i in range(retry_times):
            try:
                return await loop.run_in_executor(None, call)
            except APIError as e:
                logger.debug(f"Failed to call {path}: {e}")
                if i == retry_times - 1:
                    raise ZoneClientError(f"{path}: {e}") from e
                await asyncio.sleep(self.retry_delay)

        # not actually reachable
        raise ZoneClientError(f"Failed to call {path}")

    async def _get(self, path: str, **kwargs: Any) -> Any:
        return await self._try_request(self._api.get, path, retry_times=3, **kwargs)

    async def check_connectivity(self):
        """
        :raises ZoneClientError: if the credentials are rejected or the api is unreachable
        """
        await self._get("/me")

    async def list_record_ids(self, record_type: str) -> RecordIdListT:
        """
        :raises ZoneClientError: if failed to list records
        """
        response = await self._get(self._zone_path("/record"), fieldType=record_type)
        return cast(RecordIdListT, list(response))

    async def get_record(self, record_id: RecordIdT) -> ZoneRecordT:
        """
        :raises ZoneClientError: if failed to get the record
        """
        response = cast(
            OVHRecordT, await self._get(self._zone_path(f"/record/{record_id}"))
        )
        return ZoneRecordT(
            record_type=response["fieldType"],
            sub_domain=response["subDomain"],
            target=response["target"],
            ttl=response["ttl"],
        )

    async def add_record(self, record: ZoneRecordT):
        await self._try_request(
            self._api.post,
            self._zone_path("/record"),
            fieldType=record.record_type,
            subDomain=record.sub_domain,
            target=record.target,
            ttl=record.ttl,
        )

    async def update_record(self, record_id: RecordIdT, record: ZoneRecordT):
        await self._try_request(
            self._api.put,
            self._zone_path(f"/record/{record_id}"),
            fieldType=record.record_type,
            subDomain=record.sub_domain,
            target=record.target,
            ttl=record.ttl,
        )

    async def refresh_zone(self):
        await self._try_request(self._api.post, self._zone_path("/refresh"))

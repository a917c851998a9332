"""
Runs a reconciliation pass per address family on every tick of a fixed interval.

Each family is handled on its own: a failure to resolve or reconcile one family
is logged and leaves that family's known records as they were, the other
family is still processed in the same tick.

The stop event is only looked at between ticks, a tick that has started
always runs to completion.
"""

import asyncio
from typing import Iterable

from .client.public_ip_client import PublicIPClient
from .dns.dns import AddressFamily, ReconciliationStateT
from .dns.reconciler import RecordReconciler
from .logger import logger


class Driver:
    def __init__(
        self,
        public_ip_client: PublicIPClient,
        reconciler: RecordReconciler,
        poll_interval: float,
        families: Iterable[AddressFamily] = (AddressFamily.V4, AddressFamily.V6),
    ) -> None:
        self._public_ip_client = public_ip_client
        self._reconciler = reconciler
        self._poll_interval = poll_interval

        self._state: ReconciliationStateT = {family: [] for family in families}

    @property
    def state(self) -> ReconciliationStateT:
        return {family: list(records) for family, records in self._state.items()}

    async def _process_family(self, family: AddressFamily):
        try:
            address = await self._public_ip_client.get_public_ip(family)
        except Exception as e:
            logger.error(f"failed to get public ip for type {family.record_type}: {e}")
            return

        try:
            records = await self._reconciler.reconcile(
                list(self._state[family]), family, address
            )
        except Exception as e:
            logger.error(f"failed to manage {family.record_type} records: {e}")
            return

        self._state[family] = records

    async def tick(self):
        for family in self._state:
            await self._process_family(family)

    async def _wait_for_stop(self, stop_event: asyncio.Event) -> bool:
        """
        :return: True if the stop event was set before the interval elapsed
        """
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self, stop_event: asyncio.Event):
        logger.info(f"polling public ip every {self._poll_interval} seconds")
        while True:
            if await self._wait_for_stop(stop_event):
                logger.info("closing program")
                return

            try:
                await self.tick()
            except Exception as e:
                logger.warning(f"error while updating: {e}")

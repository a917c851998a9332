"""
Responsibility: keep the records of one address family pointed at the current public ip

a pass goes like this:
- list every record of the family's type and fetch each of them
- records already holding the current address are the new known-good set,
    nothing is written to the provider in that case
- if none match and no record was ever known for this family,
    a single apex record is created and the zone is refreshed
- if none match but some records were known, all of them are updated
    to the new address and the zone is refreshed once

the created record is not fetched back, so the pass that creates it returns an
empty set. the next pass picks it up again through listing.
"""

import asyncio

from ..logger import logger
from .dns import (
    AddressFamily,
    ManagedRecordListT,
    ManagedRecordT,
    ZoneClient,
    ZoneRecordT,
)


class RecordReconciler:
    def __init__(self, zone_client: ZoneClient) -> None:
        self._zone_client = zone_client

        # provider gives no guarantee about concurrent writes on one zone
        self._reconcile_lock = asyncio.Lock()

    async def _find_matching_records(
        self, family: AddressFamily, address: str
    ) -> ManagedRecordListT:
        """
        :raises ZoneClientError: if failed to list the record ids
        """
        record_type = family.record_type
        record_ids = await self._zone_client.list_record_ids(record_type)

        matching_records = ManagedRecordListT()
        for record_id in record_ids:
            try:
                record = await self._zone_client.get_record(record_id)
            except Exception as e:
                logger.error(
                    f"failed to retrieve {record_type} record {record_id}: {e}"
                )
                continue

            if record.record_type != record_type:
                logger.warning(
                    f"record {record_id} listed as {record_type} is a {record.record_type} record, ignoring"
                )
                continue

            if record.target == address:
                logger.debug(
                    f"matching {record_type} record found: id={record_id} sub_domain={record.sub_domain!r} target={record.target}"
                )
                matching_records.append(
                    ManagedRecordT(
                        record_id=record_id,
                        record_type=record.record_type,
                        sub_domain=record.sub_domain,
                        target=record.target,
                        ttl=record.ttl,
                    )
                )

        return matching_records

    async def _refresh_zone(self):
        try:
            await self._zone_client.refresh_zone()
        except Exception as e:
            logger.error(f"failed to refresh zone {self._zone_client.get_domain()}: {e}")

    async def _create_record(self, family: AddressFamily, address: str):
        record = ZoneRecordT(
            record_type=family.record_type, sub_domain="", target=address, ttl=0
        )
        try:
            await self._zone_client.add_record(record)
        except Exception as e:
            logger.error(
                f"failed to add {record.record_type} record: target={record.target} ttl={record.ttl}: {e}"
            )
            return

        logger.info(
            f"added {record.record_type} record: target={record.target} ttl={record.ttl}"
        )
        await self._refresh_zone()

    async def _update_records(self, previous: ManagedRecordListT, address: str):
        for managed_record in previous:
            record = ZoneRecordT(
                record_type=managed_record.record_type,
                sub_domain=managed_record.sub_domain,
                target=address,
                ttl=managed_record.ttl,
            )
            try:
                await self._zone_client.update_record(managed_record.record_id, record)
            except Exception as e:
                logger.error(
                    f"failed to update {managed_record.record_type} record {managed_record.record_id} "
                    f"(sub_domain={managed_record.sub_domain!r}, target={managed_record.target}): {e}"
                )
                continue
            logger.debug(
                f"updated {managed_record.record_type} record {managed_record.record_id} "
                f"(sub_domain={managed_record.sub_domain!r})"
            )

        await self._refresh_zone()

    async def reconcile(
        self, previous: ManagedRecordListT, family: AddressFamily, address: str
    ) -> ManagedRecordListT:
        """
        run one reconciliation pass for a family
        :return: the records now believed to hold the current address
        :raises ZoneClientError: if failed to list the records of this family,
            nothing has been written to the provider in that case
        """
        async with self._reconcile_lock:
            matching_records = await self._find_matching_records(family, address)

            if matching_records:
                logger.info(
                    f"public ip [{address}] already found in {family.record_type} record(s)"
                )
                return matching_records

            if not previous:
                await self._create_record(family, address)
                return ManagedRecordListT()

            await self._update_records(previous, address)
            logger.info(
                f"updated {family.record_type} records with new public ip [{address}]"
            )
            return list(previous)

from enum import Enum
from typing import NamedTuple

RecordIdT = int | str
RecordIdListT = list[RecordIdT]


class AddressFamily(Enum):
    V4 = "A"
    V6 = "AAAA"

    @property
    def record_type(self) -> str:
        return self.value


class ZoneRecordT(NamedTuple):
    record_type: str
    sub_domain: str
    target: str
    ttl: int


class ManagedRecordT(NamedTuple):
    record_id: RecordIdT
    record_type: str
    sub_domain: str
    target: str
    ttl: int


ManagedRecordListT = list[ManagedRecordT]
ReconciliationStateT = dict[AddressFamily, ManagedRecordListT]


class ZoneClientError(Exception):
    pass


class ZoneClient:
    """
    abstract class for the dns zone client of a single domain
    """

    def get_domain(self) -> str: ...

    async def check_connectivity(self): ...

    async def list_record_ids(self, record_type: str) -> RecordIdListT: ...

    async def get_record(self, record_id: RecordIdT) -> ZoneRecordT: ...

    async def add_record(self, record: ZoneRecordT): ...

    async def update_record(self, record_id: RecordIdT, record: ZoneRecordT): ...

    async def refresh_zone(self): ...

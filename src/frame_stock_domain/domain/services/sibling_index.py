"""Lookup from identity key to the stock rows that share it."""

from collections import defaultdict
from enum import Enum
from typing import Iterable, Optional

from src.frame_stock_domain.domain.entities.channel import Channel
from src.frame_stock_domain.domain.entities.identity_key import IdentityKey
from src.frame_stock_domain.domain.entities.stock_record import StockRecord


class SiblingScope(str, Enum):
    """Which stock rows a sale draws from."""

    ALL_CHANNELS = "all_channels"  # one physical pool shared by every channel listing
    SAME_CHANNEL = "same_channel"  # each channel is its own pool

    @classmethod
    def parse(cls, value: "SiblingScope | str | None") -> "SiblingScope":
        if isinstance(value, cls):
            return value
        if not value:
            return cls.ALL_CHANNELS
        return cls(str(value).lower())


class SiblingIndex:
    """
    Positions of every record by id, plus the ids of stock rows (live or
    exhausted, never sale records) grouped by identity key.

    Built in one pass over the record set; ledger operations build a fresh
    index for the set they receive.
    """

    def __init__(self, records: Iterable[StockRecord]) -> None:
        self._positions: dict[str, int] = {}
        self._channels: dict[str, Channel] = {}
        self._stock_rows: dict[IdentityKey, list[str]] = defaultdict(list)

        for position, record in enumerate(records):
            self._positions[record.id] = position
            self._channels[record.id] = record.channel
            if record.is_stock_row:
                self._stock_rows[record.identity_key].append(record.id)

    @classmethod
    def build(cls, records: Iterable[StockRecord]) -> "SiblingIndex":
        return cls(records)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._positions

    def position(self, record_id: str) -> Optional[int]:
        return self._positions.get(record_id)

    def stock_siblings(self, key: IdentityKey, channel: Optional[Channel] = None) -> list[str]:
        """Ids of the stock rows for `key`, optionally limited to one channel."""
        ids = self._stock_rows.get(key, [])
        if channel is None:
            return list(ids)
        return [record_id for record_id in ids if self._channels[record_id] is channel]

    def keys(self) -> list[IdentityKey]:
        return list(self._stock_rows)

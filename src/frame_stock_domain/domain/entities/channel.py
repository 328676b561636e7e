"""Sales channel and record status enums."""

from enum import Enum


class Channel(str, Enum):
    """A sales surface: the physical shop or one marketplace."""

    INVENTORY = "inventory"
    MERCADOLIVRE = "mercadolivre"
    SHOPEE = "shopee"
    AMAZON = "amazon"

    @classmethod
    def marketplaces(cls) -> list["Channel"]:
        return [channel for channel in cls if channel is not cls.INVENTORY]

    @classmethod
    def parse(cls, value: "Channel | str | None", default: "Channel | None" = None) -> "Channel":
        """Accepts an enum member or its value; legacy "marketplace" rows map to Mercado Livre."""
        if isinstance(value, cls):
            return value
        if value in (None, ""):
            if default is None:
                raise ValueError("Channel is required.")
            return default
        if value == "marketplace":
            return cls.MERCADOLIVRE
        return cls(value)

    @property
    def is_marketplace(self) -> bool:
        return self is not Channel.INVENTORY


# Target for "list on every marketplace at once"
ALL_CHANNELS = "all"


class RecordStatus(str, Enum):
    """Explicit kind of a stock record row."""

    LIVE = "live"  # stock row / listing with available quantity
    EXHAUSTED = "exhausted"  # stock row whose quantity reached zero
    SOLD = "sold"  # historical sale ledger entry

"""Read-only views over the record set."""

from src.common.dtos.stock_dtos import StockSummaryDTO
from src.frame_stock_domain.domain.entities.channel import Channel, RecordStatus
from src.frame_stock_domain.domain.entities.stock_record import StockRecord


def matches_search(record: StockRecord, search: str) -> bool:
    """Case-insensitive substring match over name and brand, plain substring over EAN."""
    if not search:
        return True
    term = search.lower()
    return term in (record.name or "").lower() or term in (record.brand or "").lower() or search in (record.ean or "")


def active_stock(records: list[StockRecord], channel: Channel | str, search: str = "") -> list[StockRecord]:
    """Rows on sale in `channel`."""
    target = Channel.parse(channel)
    return [
        r for r in records if r.channel is target and r.status is RecordStatus.LIVE and matches_search(r, search)
    ]


def sold_history(records: list[StockRecord], search: str = "") -> list[StockRecord]:
    """Every sale record, whatever channel it was listed on."""
    return [r for r in records if r.is_sale_record and r.sold_channel is not None and matches_search(r, search)]


def physical_sales(records: list[StockRecord], search: str = "") -> list[StockRecord]:
    return [r for r in sold_history(records, search) if r.sold_channel is Channel.INVENTORY]


def online_sales(records: list[StockRecord], search: str = "") -> list[StockRecord]:
    return [r for r in sold_history(records, search) if r.sold_channel.is_marketplace]


def channel_records(records: list[StockRecord], channel: Channel | str) -> list[StockRecord]:
    """All rows of a channel, sold ones included (print/export listing)."""
    target = Channel.parse(channel)
    return [r for r in records if r.channel is target]


def unlisted_inventory(records: list[StockRecord], search: str = "") -> list[StockRecord]:
    """Physical-shop rows on sale that have not been listed on any marketplace yet."""
    return [r for r in active_stock(records, Channel.INVENTORY, search) if not r.has_channel_listing]


def stock_summary(records: list[StockRecord]) -> StockSummaryDTO:
    summary = StockSummaryDTO(
        available_units_by_channel={channel.value: 0 for channel in Channel},
        live_listings_by_channel={channel.value: 0 for channel in Channel},
    )
    for record in records:
        if record.status is RecordStatus.LIVE:
            summary.available_units_by_channel[record.channel.value] += record.quantity
            summary.live_listings_by_channel[record.channel.value] += 1
        elif record.status is RecordStatus.EXHAUSTED:
            summary.exhausted_rows += 1
        elif record.sold_channel is not None:
            units = record.sold_quantity or 0
            revenue = (record.channel_price or 0.0) * units
            summary.units_sold += units
            if record.sold_channel is Channel.INVENTORY:
                summary.physical_sales_count += 1
                summary.physical_revenue += revenue
            else:
                summary.online_sales_count += 1
                summary.online_revenue += revenue
    return summary

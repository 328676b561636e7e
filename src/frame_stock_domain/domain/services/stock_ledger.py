"""
Stock ledger: sale execution and restore/undo over the full record set.

Both operations are pure transforms. They never mutate the list or the
records they receive; changed rows are replaced by copies and the caller
persists the returned set. A rejected operation returns the input set
unchanged together with the reason.
"""

import dataclasses
import logging
from datetime import datetime
from typing import Optional

from src.common.dtos.stock_dtos import BuyerInfoDTO
from src.common.exceptions.custom_exceptions import (
    InvalidQuantityError,
    InvalidRecordStateError,
    LedgerError,
    RecordNotFoundError,
)
from src.common.utils.date_utils import now_utc
from src.frame_stock_domain.domain.entities.channel import Channel, RecordStatus
from src.frame_stock_domain.domain.entities.stock_record import StockRecord, new_record_id
from src.frame_stock_domain.domain.services.ledger_result import LedgerResult
from src.frame_stock_domain.domain.services.sibling_index import SiblingIndex, SiblingScope

logger = logging.getLogger(__name__)


def _take(row: StockRecord, units: int) -> tuple[StockRecord, int]:
    """Decrements a stock row, floored at zero. Returns the new row and the units actually taken."""
    taken = min(row.quantity, units)
    next_quantity = row.quantity - taken
    status = RecordStatus.EXHAUSTED if next_quantity == 0 else RecordStatus.LIVE
    return dataclasses.replace(row, quantity=next_quantity, status=status, sold_channel=None), taken


def _give_back(row: StockRecord, units: int) -> StockRecord:
    next_quantity = row.quantity + units
    status = RecordStatus.LIVE if next_quantity > 0 else RecordStatus.EXHAUSTED
    return dataclasses.replace(row, quantity=next_quantity, status=status)


def sell(
    records: list[StockRecord],
    target: StockRecord,
    quantity: int,
    channel: Channel | str | None = None,
    buyer_info: Optional[BuyerInfoDTO] = None,
    scope: SiblingScope = SiblingScope.ALL_CHANNELS,
    sold_at: Optional[datetime] = None,
) -> LedgerResult:
    """
    Records a sale of `quantity` units of `target` through `channel`.

    Appends a new SOLD record (the permanent ledger entry, returned as
    `sale_record`) and decrements every stock row sharing the target's
    identity key within `scope`. Rows reaching zero become EXHAUSTED.

    `channel` defaults to the target's own channel.
    """
    index = SiblingIndex.build(records)
    position = index.position(target.id)
    if position is None:
        logger.warning(f"Sale ignored, record {target.id} is not in the current set")
        return LedgerResult.rejected(records, RecordNotFoundError(target.id))

    current = records[position]
    if current.is_sale_record:
        return LedgerResult.rejected(
            records, InvalidRecordStateError(f"Record {current.id} is a sale record and cannot be sold", current.id)
        )
    if quantity < 1 or quantity > current.quantity:
        return LedgerResult.rejected(records, InvalidQuantityError(quantity, current.quantity, current.id))

    try:
        sold_through = Channel.parse(channel, default=current.channel)
    except ValueError:
        return LedgerResult.rejected(records, LedgerError(f"Unknown sales channel: {channel}", current.id))
    pool_channel = current.channel if scope is SiblingScope.SAME_CHANNEL else None

    updated = list(records)
    allocations: dict[str, int] = {}
    for sibling_id in index.stock_siblings(current.identity_key, channel=pool_channel):
        sibling_position = index.position(sibling_id)
        updated[sibling_position], allocations[sibling_id] = _take(updated[sibling_position], quantity)

    sale_record = dataclasses.replace(
        current,
        id=new_record_id(),
        images=list(current.images),
        status=RecordStatus.SOLD,
        sold_channel=sold_through,
        sold_quantity=quantity,
        sold_at=sold_at or now_utc(),
        quantity=quantity,
        buyer_info=buyer_info,
        allocations=allocations,
    )
    updated.append(sale_record)

    logger.info(
        f"Sold {quantity} x {current.identity_key} via {sold_through.value} "
        f"(sale {sale_record.id}, {len(allocations)} stock rows updated)"
    )
    return LedgerResult(records=updated, sale_record=sale_record)


def restore(records: list[StockRecord], record: StockRecord) -> LedgerResult:
    """
    Reverses a sale.

    A SOLD record is removed and its units go back to the stock rows it was
    taken from. An EXHAUSTED row with no sale history is put back on sale
    with a quantity of one. Unknown ids and live rows are no-ops, so
    restoring twice is harmless.
    """
    index = SiblingIndex.build(records)
    position = index.position(record.id)
    if position is None:
        logger.info(f"Restore ignored, record {record.id} is not in the current set")
        return LedgerResult.unchanged(records)

    current = records[position]

    if current.status is RecordStatus.EXHAUSTED:
        updated = list(records)
        updated[position] = dataclasses.replace(
            current,
            status=RecordStatus.LIVE,
            quantity=1,
            sold_channel=None,
            sold_quantity=None,
            sold_at=None,
            buyer_info=None,
            allocations=None,
        )
        logger.info(f"Exhausted row {current.id} put back on sale with quantity 1")
        return LedgerResult(records=updated)

    if not current.is_sale_record:
        return LedgerResult.unchanged(records)

    remaining = [r for r in records if r.id != current.id]
    remaining_index = SiblingIndex.build(remaining)

    if current.allocations is not None:
        returns = current.allocations
    else:
        # Sale records stored before allocations existed
        units = current.sold_quantity or 1
        returns = {sibling_id: units for sibling_id in remaining_index.stock_siblings(current.identity_key)}

    for sibling_id, units in returns.items():
        sibling_position = remaining_index.position(sibling_id)
        if sibling_position is None or units <= 0:
            continue
        sibling = remaining[sibling_position]
        if not sibling.is_stock_row:
            continue
        remaining[sibling_position] = _give_back(sibling, units)

    logger.info(f"Sale {current.id} of {current.sold_quantity} x {current.identity_key} reversed")
    return LedgerResult(records=remaining)

"""Channel listings: cloning inventory rows to marketplaces, edits, intake and removal."""

import dataclasses
import logging
from typing import Any, Iterable

from src.common.exceptions.custom_exceptions import (
    InvalidFieldError,
    InvalidRecordStateError,
    LedgerError,
    RecordNotFoundError,
)
from src.common.utils.date_utils import now_utc
from src.frame_stock_domain.domain.entities.channel import ALL_CHANNELS, Channel, RecordStatus
from src.frame_stock_domain.domain.entities.stock_record import (
    DESCRIPTIVE_FIELDS,
    StockRecord,
    new_record_id,
)
from src.frame_stock_domain.domain.services.ledger_result import LedgerResult
from src.frame_stock_domain.domain.services.sibling_index import SiblingIndex

logger = logging.getLogger(__name__)

# Fields only the ledger may change
PROTECTED_FIELDS = {"id", "status", "sold_channel", "sold_quantity", "sold_at", "buyer_info", "allocations"}
EDITABLE_FIELDS = {f.name for f in dataclasses.fields(StockRecord)} - PROTECTED_FIELDS


def _target_channels(channel: Channel | str) -> list[Channel]:
    if channel == ALL_CHANNELS:
        return Channel.marketplaces()
    target = Channel.parse(channel)
    if not target.is_marketplace:
        raise ValueError(f"{target.value} is not a marketplace")
    return [target]


def clone_to_channel(
    records: list[StockRecord], source: StockRecord, price: float, channel: Channel | str
) -> LedgerResult:
    """
    Lists `source` on `channel` (or on every marketplace with ALL_CHANNELS).

    Each target gets an independent new record with quantity 1 at `price`.
    The source row is only flagged as listed. Marketplaces that already
    carry a stock row for the same frame are skipped.
    """
    index = SiblingIndex.build(records)
    position = index.position(source.id)
    if position is None:
        logger.warning(f"Listing ignored, record {source.id} is not in the current set")
        return LedgerResult.rejected(records, RecordNotFoundError(source.id))

    current = records[position]
    if current.is_sale_record:
        return LedgerResult.rejected(
            records, InvalidRecordStateError(f"Record {current.id} is a sale record and cannot be listed", current.id)
        )
    if current.channel is not Channel.INVENTORY:
        return LedgerResult.rejected(
            records,
            InvalidRecordStateError(
                f"Only inventory rows can be listed, {current.id} is on {current.channel.value}", current.id
            ),
        )

    try:
        requested = _target_channels(channel)
    except ValueError:
        return LedgerResult.rejected(records, LedgerError(f"Unknown sales channel: {channel}", current.id))

    targets = [target for target in requested if not index.stock_siblings(current.identity_key, channel=target)]
    if not targets:
        return LedgerResult.rejected(
            records,
            InvalidRecordStateError(
                f"{current.identity_key} is already listed on {', '.join(t.value for t in requested)}", current.id
            ),
        )

    clones = []
    for target in targets:
        clones.append(
            dataclasses.replace(
                current,
                id=new_record_id(),
                images=list(current.images),
                channel=target,
                quantity=1,
                status=RecordStatus.LIVE,
                sold_channel=None,
                sold_quantity=None,
                sold_at=None,
                buyer_info=None,
                allocations=None,
                channel_price=price,
                has_channel_listing=True,
                created_at=now_utc(),
            )
        )

    updated = list(records)
    updated[position] = dataclasses.replace(current, has_channel_listing=True)
    updated.extend(clones)

    logger.info(
        f"Listed {current.identity_key} on {', '.join(c.channel.value for c in clones)} at {price:.2f}"
    )
    return LedgerResult(records=updated, created=clones)


def edit_record(records: list[StockRecord], record_id: str, updates: dict[str, Any]) -> LedgerResult:
    """
    Applies `updates` to one record and copies the descriptive fields to
    every stock row sharing its original identity key. Sale records are
    left as they were sold.
    """
    bad_fields = [name for name in updates if name not in EDITABLE_FIELDS]
    if bad_fields:
        return LedgerResult.rejected(records, InvalidFieldError(bad_fields, record_id))

    index = SiblingIndex.build(records)
    position = index.position(record_id)
    if position is None:
        return LedgerResult.rejected(records, RecordNotFoundError(record_id))

    current = records[position]
    if current.is_sale_record:
        return LedgerResult.rejected(
            records, InvalidRecordStateError(f"Record {current.id} is a sale record and cannot be edited", current.id)
        )

    changes = dict(updates)
    if changes.get("images") is not None:
        changes["images"] = list(changes["images"])
    if "quantity" in changes and current.is_stock_row and changes["quantity"] is not None:
        changes["status"] = RecordStatus.LIVE if changes["quantity"] > 0 else RecordStatus.EXHAUSTED

    updated = list(records)
    try:
        updated[position] = dataclasses.replace(current, **changes)
    except ValueError as e:
        return LedgerResult.rejected(records, LedgerError(f"Invalid edit for record {record_id}: {e}", record_id))

    shared = {name: value for name, value in updates.items() if name in DESCRIPTIVE_FIELDS}
    if shared:
        for sibling_id in index.stock_siblings(current.identity_key):
            if sibling_id == record_id:
                continue
            sibling_position = index.position(sibling_id)
            own = dict(shared)
            if "images" in own and own["images"] is not None:
                own["images"] = list(own["images"])
            updated[sibling_position] = dataclasses.replace(updated[sibling_position], **own)

    return LedgerResult(records=updated)


def add_records(records: list[StockRecord], new_records: Iterable[StockRecord]) -> LedgerResult:
    """Intake: new rows go first, as live stock."""
    existing_ids = {r.id for r in records}
    intake = []
    for record in new_records:
        if record.is_sale_record:
            logger.warning(f"Skipping sale record {record.id} offered as intake")
            continue
        if record.id in existing_ids:
            record = dataclasses.replace(record, id=new_record_id())
        status = RecordStatus.LIVE if record.quantity > 0 else RecordStatus.EXHAUSTED
        if record.status is not status:
            record = dataclasses.replace(record, status=status)
        existing_ids.add(record.id)
        intake.append(record)

    if not intake:
        return LedgerResult.unchanged(records)
    logger.info(f"Registered {len(intake)} new records")
    return LedgerResult(records=intake + list(records), created=intake)


def remove_record(records: list[StockRecord], record_id: str) -> LedgerResult:
    remaining = [r for r in records if r.id != record_id]
    if len(remaining) == len(records):
        return LedgerResult.unchanged(records)
    return LedgerResult(records=remaining)


def clear_channel(records: list[StockRecord], channel: Channel | str) -> LedgerResult:
    """Removes every row listed on `channel`, sale records included."""
    try:
        target = Channel.parse(channel)
    except ValueError:
        return LedgerResult.rejected(records, LedgerError(f"Unknown sales channel: {channel}"))
    remaining = [r for r in records if r.channel is not target]
    if len(remaining) == len(records):
        return LedgerResult.unchanged(records)
    logger.info(f"Cleared {len(records) - len(remaining)} records from {target.value}")
    return LedgerResult(records=remaining)


def clear_sales(records: list[StockRecord]) -> LedgerResult:
    """Drops the sale history. Stock rows stay."""
    remaining = [r for r in records if not r.is_sale_record]
    if len(remaining) == len(records):
        return LedgerResult.unchanged(records)
    logger.info(f"Cleared {len(records) - len(remaining)} sale records")
    return LedgerResult(records=remaining)

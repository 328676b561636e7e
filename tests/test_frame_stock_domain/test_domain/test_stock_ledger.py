"""Tests for the stock ledger (sell / restore)."""

from datetime import datetime

import pytest
import pytz

from src.common.exceptions.custom_exceptions import (
    InvalidQuantityError,
    InvalidRecordStateError,
    RecordNotFoundError,
)
from src.frame_stock_domain.domain.entities.channel import Channel, RecordStatus
from src.frame_stock_domain.domain.entities.stock_record import StockRecord
from src.frame_stock_domain.domain.services.sibling_index import SiblingScope
from src.frame_stock_domain.domain.services.stock_ledger import restore, sell


def _by_id(records: list[StockRecord], record_id: str) -> StockRecord:
    return next(r for r in records if r.id == record_id)


def _live_units(records: list[StockRecord], brand: str, model_code: str, color_code: str) -> int:
    return sum(
        r.quantity
        for r in records
        if r.is_stock_row and (r.brand, r.model_code, r.color_code) == (brand, model_code, color_code)
    )


def test_sell_from_inventory_decrements_stock_and_appends_sale_record(ray_ban_inventory, sample_buyer) -> None:
    records = [ray_ban_inventory]

    result = sell(records, ray_ban_inventory, 2, Channel.INVENTORY, sample_buyer)

    assert result.ok
    assert _by_id(result.records, "inv-rb3025").quantity == 3
    assert _by_id(result.records, "inv-rb3025").status is RecordStatus.LIVE
    sale = result.sale_record
    assert sale is result.records[-1]
    assert sale.id != ray_ban_inventory.id
    assert sale.is_sold
    assert sale.status is RecordStatus.SOLD
    assert sale.sold_channel is Channel.INVENTORY
    assert sale.sold_quantity == 2
    assert sale.quantity == 2
    assert sale.buyer_info == sample_buyer
    assert sale.sold_at is not None
    assert sale.allocations == {"inv-rb3025": 2}


def test_sell_does_not_mutate_input(ray_ban_inventory) -> None:
    records = [ray_ban_inventory]

    sell(records, ray_ban_inventory, 2, Channel.INVENTORY)

    assert records == [ray_ban_inventory]
    assert ray_ban_inventory.quantity == 5


def test_sell_last_units_marks_row_exhausted(ray_ban_inventory) -> None:
    result = sell([ray_ban_inventory], ray_ban_inventory, 5, Channel.INVENTORY)

    row = _by_id(result.records, "inv-rb3025")
    assert row.quantity == 0
    assert row.status is RecordStatus.EXHAUSTED
    assert row.is_sold
    assert not row.is_sale_record
    assert row.sold_channel is None


def test_sell_decrements_siblings_in_every_channel_by_default(ray_ban_inventory, ray_ban_shopee) -> None:
    records = [ray_ban_inventory, ray_ban_shopee]

    result = sell(records, ray_ban_inventory, 1, Channel.INVENTORY)

    assert _by_id(result.records, "inv-rb3025").quantity == 4
    shopee = _by_id(result.records, "shp-rb3025")
    assert shopee.quantity == 0
    assert shopee.status is RecordStatus.EXHAUSTED
    assert result.sale_record.allocations == {"inv-rb3025": 1, "shp-rb3025": 1}


def test_sell_same_channel_scope_leaves_other_channels_untouched(ray_ban_inventory, ray_ban_shopee) -> None:
    records = [ray_ban_inventory, ray_ban_shopee]

    result = sell(records, ray_ban_inventory, 1, Channel.INVENTORY, scope=SiblingScope.SAME_CHANNEL)

    assert _by_id(result.records, "inv-rb3025").quantity == 4
    assert _by_id(result.records, "shp-rb3025") is ray_ban_shopee
    assert ray_ban_shopee.quantity == 1


def test_sell_ignores_other_products(sample_records, oakley_inventory, ray_ban_inventory) -> None:
    result = sell(sample_records, ray_ban_inventory, 1, Channel.INVENTORY)

    assert _by_id(result.records, "inv-oo9208") is oakley_inventory


def test_sell_identity_key_is_case_sensitive(ray_ban_inventory) -> None:
    lower = StockRecord(brand="ray-ban", model_code="RB3025", color_code="G-15", quantity=3)

    result = sell([ray_ban_inventory, lower], ray_ban_inventory, 1, Channel.INVENTORY)

    assert _by_id(result.records, lower.id).quantity == 3


def test_sell_from_marketplace_listing_records_marketplace_channel(ray_ban_inventory, ray_ban_shopee) -> None:
    result = sell([ray_ban_inventory, ray_ban_shopee], ray_ban_shopee, 1, Channel.SHOPEE)

    assert result.sale_record.sold_channel is Channel.SHOPEE
    assert result.sale_record.channel is Channel.SHOPEE
    assert result.sale_record.channel_price == pytest.approx(246.94)


def test_sell_channel_defaults_to_target_channel(ray_ban_shopee) -> None:
    result = sell([ray_ban_shopee], ray_ban_shopee, 1)

    assert result.sale_record.sold_channel is Channel.SHOPEE


def test_sell_floors_siblings_at_zero(ray_ban_inventory, ray_ban_shopee) -> None:
    result = sell([ray_ban_inventory, ray_ban_shopee], ray_ban_inventory, 4, Channel.INVENTORY)

    assert all(r.quantity >= 0 for r in result.records)
    assert _by_id(result.records, "shp-rb3025").quantity == 0
    assert result.sale_record.allocations["shp-rb3025"] == 1


@pytest.mark.parametrize("quantity", [0, -1, 6])
def test_sell_rejects_invalid_quantity(ray_ban_inventory, quantity) -> None:
    records = [ray_ban_inventory]

    result = sell(records, ray_ban_inventory, quantity, Channel.INVENTORY)

    assert not result.ok
    assert isinstance(result.error, InvalidQuantityError)
    assert result.records == records
    assert result.sale_record is None
    assert not result.changed


def test_sell_unknown_record_is_rejected_without_changes(ray_ban_inventory, oakley_inventory) -> None:
    result = sell([ray_ban_inventory], oakley_inventory, 1, Channel.INVENTORY)

    assert isinstance(result.error, RecordNotFoundError)
    assert result.records == [ray_ban_inventory]


def test_sell_rejects_sale_records(ray_ban_inventory, sample_sale_record) -> None:
    result = sell([ray_ban_inventory, sample_sale_record], sample_sale_record, 1, Channel.INVENTORY)

    assert isinstance(result.error, InvalidRecordStateError)


def test_sell_uses_current_row_not_stale_handle(ray_ban_inventory) -> None:
    first = sell([ray_ban_inventory], ray_ban_inventory, 4, Channel.INVENTORY)

    # the caller still holds the five-unit handle
    second = sell(first.records, ray_ban_inventory, 2, Channel.INVENTORY)

    assert isinstance(second.error, InvalidQuantityError)
    assert second.error.available == 1


def test_later_sales_never_alter_earlier_sale_records(ray_ban_inventory, sample_buyer) -> None:
    first = sell([ray_ban_inventory], ray_ban_inventory, 1, Channel.INVENTORY, sample_buyer)
    snapshot = (
        first.sale_record.sold_quantity,
        first.sale_record.sold_at,
        first.sale_record.sold_channel,
        first.sale_record.buyer_info,
    )

    second = sell(first.records, ray_ban_inventory, 3, Channel.AMAZON)

    stored = _by_id(second.records, first.sale_record.id)
    assert (stored.sold_quantity, stored.sold_at, stored.sold_channel, stored.buyer_info) == snapshot
    assert stored is first.sale_record


def test_restore_returns_stock_and_removes_sale_record(ray_ban_inventory) -> None:
    sold = sell([ray_ban_inventory], ray_ban_inventory, 2, Channel.INVENTORY)

    result = restore(sold.records, sold.sale_record)

    assert result.ok
    assert [r.id for r in result.records] == ["inv-rb3025"]
    assert result.records[0].quantity == 5
    assert result.records[0].status is RecordStatus.LIVE


def test_sell_then_restore_conserves_quantity_across_channels(ray_ban_inventory, ray_ban_shopee) -> None:
    records = [ray_ban_inventory, ray_ban_shopee]
    before = _live_units(records, "Ray-Ban", "RB3025", "G-15")

    first = sell(records, ray_ban_inventory, 3, Channel.INVENTORY)
    second = sell(first.records, ray_ban_inventory, 2, Channel.MERCADOLIVRE)
    undone = restore(second.records, second.sale_record)
    undone = restore(undone.records, first.sale_record)

    assert _live_units(undone.records, "Ray-Ban", "RB3025", "G-15") == before
    assert _by_id(undone.records, "shp-rb3025").quantity == 1
    assert _by_id(undone.records, "shp-rb3025").status is RecordStatus.LIVE
    assert not any(r.is_sale_record for r in undone.records)


def test_restore_twice_is_a_no_op(ray_ban_inventory) -> None:
    sold = sell([ray_ban_inventory], ray_ban_inventory, 2, Channel.INVENTORY)
    once = restore(sold.records, sold.sale_record)

    twice = restore(once.records, sold.sale_record)

    assert twice.ok
    assert not twice.changed
    assert twice.records == once.records


def test_restore_exhausted_row_without_sale_history_resets_to_one() -> None:
    exhausted = StockRecord(
        brand="Ray-Ban", model_code="RB2140", color_code="901", quantity=0, status=RecordStatus.EXHAUSTED
    )

    result = restore([exhausted], exhausted)

    row = result.records[0]
    assert row.status is RecordStatus.LIVE
    assert row.quantity == 1
    assert row.sold_channel is None
    assert row.buyer_info is None


def test_restore_live_row_changes_nothing(ray_ban_inventory) -> None:
    result = restore([ray_ban_inventory], ray_ban_inventory)

    assert result.ok
    assert not result.changed
    assert result.records == [ray_ban_inventory]


def test_restore_legacy_sale_without_allocations_gives_back_sold_quantity(ray_ban_inventory, ray_ban_shopee) -> None:
    legacy_sale = StockRecord(
        brand="Ray-Ban",
        model_code="RB3025",
        color_code="G-15",
        quantity=2,
        status=RecordStatus.SOLD,
        sold_channel=Channel.INVENTORY,
        sold_quantity=2,
        sold_at=datetime(2023, 12, 1, tzinfo=pytz.utc),
    )

    result = restore([ray_ban_inventory, ray_ban_shopee, legacy_sale], legacy_sale)

    assert _by_id(result.records, "inv-rb3025").quantity == 7
    assert _by_id(result.records, "shp-rb3025").quantity == 3
    assert len(result.records) == 2


def test_restore_skips_stock_rows_deleted_after_the_sale(ray_ban_inventory, ray_ban_shopee) -> None:
    sold = sell([ray_ban_inventory, ray_ban_shopee], ray_ban_inventory, 1, Channel.INVENTORY)
    without_shopee = [r for r in sold.records if r.id != "shp-rb3025"]

    result = restore(without_shopee, sold.sale_record)

    assert [r.id for r in result.records] == ["inv-rb3025"]
    assert result.records[0].quantity == 5


def test_sell_unknown_channel_is_rejected(ray_ban_inventory) -> None:
    result = sell([ray_ban_inventory], ray_ban_inventory, 1, "ebay")

    assert not result.ok
    assert "Unknown sales channel" in str(result.error)
    assert result.records == [ray_ban_inventory]

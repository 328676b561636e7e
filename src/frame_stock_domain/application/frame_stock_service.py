# src/frame_stock_domain/application/frame_stock_service.py
"""Application service for the frame stock and sales ledger."""

import logging
from threading import Lock
from typing import Any, Callable, Optional

from src.common.config.settings import settings
from src.common.dtos.stock_dtos import BuyerInfoDTO, PricingBreakdownDTO, SaleReceiptDTO, StockSummaryDTO
from src.common.exceptions.custom_exceptions import RecordNotFoundError
from src.frame_stock_domain.domain.entities.channel import Channel
from src.frame_stock_domain.domain.entities.stock_record import StockRecord
from src.frame_stock_domain.domain.repositories.stock_record_repository import IStockRecordRepository
from src.frame_stock_domain.domain.services import channel_listing_manager, stock_ledger, stock_queries
from src.frame_stock_domain.domain.services.ledger_result import LedgerResult
from src.frame_stock_domain.domain.services.pricing_calculator import price_breakdown
from src.frame_stock_domain.domain.services.sale_receipt import build_sale_receipt
from src.frame_stock_domain.domain.services.sibling_index import SiblingScope

logger = logging.getLogger(__name__)


class FrameStockApplicationService:
    """
    Runs ledger and listing operations against the stored record set.

    Every mutating call is load -> transform -> save under one lock, so two
    sales can never interleave against stale copies of the set.
    """

    def __init__(self, stock_repo: IStockRecordRepository, sibling_scope: SiblingScope | str | None = None) -> None:
        """Initializes the FrameStockApplicationService."""
        self.stock_repo = stock_repo
        self.sibling_scope = SiblingScope.parse(sibling_scope or settings.LEDGER_SIBLING_SCOPE)
        self._lock = Lock()

    def _apply(self, operation: str, transform: Callable[[list[StockRecord]], LedgerResult]) -> LedgerResult:
        with self._lock:
            records = self.stock_repo.load()
            result = transform(records)
            if not result.ok:
                logger.warning(f"{operation} rejected: {result.error}")
                return result
            if result.changed:
                self.stock_repo.save(result.records)
            return result

    def _find(self, records: list[StockRecord], record_id: str) -> Optional[StockRecord]:
        return next((r for r in records if r.id == record_id), None)

    def sell(
        self,
        record_id: str,
        quantity: int = 1,
        channel: Channel | str | None = None,
        buyer_info: Optional[BuyerInfoDTO] = None,
    ) -> LedgerResult:
        """Sells `quantity` units of a record. The sale record is returned for receipt generation."""

        def transform(records: list[StockRecord]) -> LedgerResult:
            target = self._find(records, record_id)
            if target is None:
                return LedgerResult.rejected(records, RecordNotFoundError(record_id))
            return stock_ledger.sell(records, target, quantity, channel, buyer_info, scope=self.sibling_scope)

        return self._apply("Sale", transform)

    def restore(self, record_id: str) -> LedgerResult:
        """Undoes a sale (or puts an exhausted row back on sale). Unknown ids are ignored."""

        def transform(records: list[StockRecord]) -> LedgerResult:
            record = self._find(records, record_id)
            if record is None:
                return LedgerResult.unchanged(records)
            return stock_ledger.restore(records, record)

        return self._apply("Restore", transform)

    def clone_to_channel(self, record_id: str, price: float, channel: Channel | str) -> LedgerResult:
        def transform(records: list[StockRecord]) -> LedgerResult:
            source = self._find(records, record_id)
            if source is None:
                return LedgerResult.rejected(records, RecordNotFoundError(record_id))
            return channel_listing_manager.clone_to_channel(records, source, price, channel)

        return self._apply("Listing", transform)

    def quote_channel_price(
        self,
        cost_price: float,
        markup_multiplier: float | None = None,
        fee_percent: float | None = None,
        shipping_flat: float | None = None,
    ) -> PricingBreakdownDTO:
        """Channel price with the configured pricing defaults filled in."""
        return price_breakdown(
            cost_price,
            settings.PRICING_DEFAULT_MARKUP if markup_multiplier is None else markup_multiplier,
            settings.PRICING_DEFAULT_FEE_PERCENT if fee_percent is None else fee_percent,
            settings.PRICING_SHIPPING_FLAT if shipping_flat is None else shipping_flat,
        )

    def list_on_channel_with_pricing(
        self,
        record_id: str,
        channel: Channel | str,
        markup_multiplier: float | None = None,
        fee_percent: float | None = None,
        shipping_flat: float | None = None,
    ) -> LedgerResult:
        """Prices a record from its purchase price and lists it on `channel`."""

        def transform(records: list[StockRecord]) -> LedgerResult:
            source = self._find(records, record_id)
            if source is None:
                return LedgerResult.rejected(records, RecordNotFoundError(record_id))
            quote = self.quote_channel_price(source.purchase_price, markup_multiplier, fee_percent, shipping_flat)
            return channel_listing_manager.clone_to_channel(records, source, quote.price, channel)

        return self._apply("Listing", transform)

    def edit_record(self, record_id: str, updates: dict[str, Any]) -> LedgerResult:
        return self._apply("Edit", lambda records: channel_listing_manager.edit_record(records, record_id, updates))

    def register_frames(self, new_records: list[StockRecord]) -> LedgerResult:
        return self._apply("Intake", lambda records: channel_listing_manager.add_records(records, new_records))

    def delete_record(self, record_id: str) -> LedgerResult:
        return self._apply("Delete", lambda records: channel_listing_manager.remove_record(records, record_id))

    def clear_channel(self, channel: Channel | str) -> LedgerResult:
        return self._apply("Clear", lambda records: channel_listing_manager.clear_channel(records, channel))

    def clear_sales(self) -> LedgerResult:
        return self._apply("Clear sales", channel_listing_manager.clear_sales)

    def get_active_stock(self, channel: Channel | str, search: str = "") -> list[StockRecord]:
        return stock_queries.active_stock(self.stock_repo.load(), channel, search)

    def get_sold_history(self, search: str = "") -> list[StockRecord]:
        return stock_queries.sold_history(self.stock_repo.load(), search)

    def get_physical_sales(self, search: str = "") -> list[StockRecord]:
        return stock_queries.physical_sales(self.stock_repo.load(), search)

    def get_online_sales(self, search: str = "") -> list[StockRecord]:
        return stock_queries.online_sales(self.stock_repo.load(), search)

    def get_unlisted_inventory(self, search: str = "") -> list[StockRecord]:
        return stock_queries.unlisted_inventory(self.stock_repo.load(), search)

    def get_stock_summary(self) -> StockSummaryDTO:
        return stock_queries.stock_summary(self.stock_repo.load())

    def get_receipt(self, sale_record_id: str) -> SaleReceiptDTO:
        """Receipt data for a stored sale record; raises if it does not exist."""
        record = self._find(self.stock_repo.load(), sale_record_id)
        if record is None:
            raise RecordNotFoundError(sale_record_id)
        return build_sale_receipt(record)

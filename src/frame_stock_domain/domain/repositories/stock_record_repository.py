# src/frame_stock_domain/domain/repositories/stock_record_repository.py
"""Stock record repository interface."""
from abc import ABC, abstractmethod

from src.frame_stock_domain.domain.entities.stock_record import StockRecord


class IStockRecordRepository(ABC):
    """The ledger works on the full record set; storage only loads and replaces it."""

    @abstractmethod
    def load(self) -> list[StockRecord]:
        """Loads the current full record set."""
        pass

    @abstractmethod
    def save(self, records: list[StockRecord]) -> None:
        """Replaces the stored record set with the given one."""
        pass

"""Return value of every record-set transform."""

from dataclasses import dataclass, field
from typing import Optional

from src.common.exceptions.custom_exceptions import LedgerError
from src.frame_stock_domain.domain.entities.stock_record import StockRecord


@dataclass
class LedgerResult:
    """
    The full record set after an operation.

    `error` is set when the operation was rejected; in that case `records`
    equals the input set. `changed` is False whenever nothing needs saving.
    """

    records: list[StockRecord]
    sale_record: Optional[StockRecord] = None
    created: list[StockRecord] = field(default_factory=list)
    error: Optional[LedgerError] = None
    changed: bool = True

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def rejected(cls, records: list[StockRecord], error: LedgerError) -> "LedgerResult":
        return cls(records=list(records), error=error, changed=False)

    @classmethod
    def unchanged(cls, records: list[StockRecord]) -> "LedgerResult":
        return cls(records=list(records), changed=False)

"""Data Transfer Objects for frame stock, sales and receipts."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class AddressDTO:
    """Postal address as returned by the CEP lookup."""

    cep: str
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True)  # Attached to sale records, which never change after the sale
class BuyerInfoDTO:
    """Buyer contact and delivery data captured at sale time."""

    name: Optional[str] = None
    cpf: Optional[str] = None
    phone: Optional[str] = None
    cep: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    def with_address(self, address: AddressDTO) -> "BuyerInfoDTO":
        """Returns a copy with the looked-up address fields filled in."""
        return dataclasses.replace(
            self,
            cep=address.cep,
            street=address.street or self.street,
            neighborhood=address.neighborhood or self.neighborhood,
            city=address.city or self.city,
            state=address.state or self.state,
        )

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in dataclasses.asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["BuyerInfoDTO"]:
        if not data:
            return None
        valid_keys = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: (str(v) if v is not None else None) for k, v in data.items() if k in valid_keys})


@dataclass(frozen=True)
class PricingBreakdownDTO:
    """Intermediate values of the channel price formula."""

    base: float
    fee: float
    shipping: float
    price: float


@dataclass
class SaleReceiptLineDTO:
    quantity: int
    description: str
    unit_price: float
    total: float


@dataclass
class SaleReceiptDTO:
    """Everything a receipt renderer needs for one sale record."""

    sale_id: str
    order_number: str
    sold_at: Optional[datetime]
    sold_at_display: str
    sold_channel: str
    customer_name: str
    buyer: Optional[BuyerInfoDTO]
    lines: list[SaleReceiptLineDTO] = field(default_factory=list)
    total: float = 0.0
    barcode_value: str = ""
    barcode_format: str = "CODE128"


@dataclass
class StockSummaryDTO:
    """Aggregated counters over the full record set."""

    available_units_by_channel: dict[str, int] = field(default_factory=dict)
    live_listings_by_channel: dict[str, int] = field(default_factory=dict)
    exhausted_rows: int = 0
    physical_sales_count: int = 0
    online_sales_count: int = 0
    units_sold: int = 0
    physical_revenue: float = 0.0
    online_revenue: float = 0.0

    @property
    def total_revenue(self) -> float:
        return self.physical_revenue + self.online_revenue

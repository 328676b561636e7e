"""Stock record entity."""

import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.common.dtos.stock_dtos import BuyerInfoDTO
from src.common.utils.date_utils import from_epoch_ms, now_utc, to_epoch_ms

from .channel import Channel, RecordStatus
from .identity_key import IdentityKey

logger = logging.getLogger(__name__)

# Product description fields shared by every sibling of an identity key
DESCRIPTIVE_FIELDS = (
    "name",
    "brand",
    "model_code",
    "color_code",
    "size",
    "ean",
    "gender",
    "images",
    "lens_width",
    "lens_height",
    "temple_length",
    "bridge_size",
    "front_color",
    "front_material",
    "temple_material",
    "lens_color",
    "lens_material",
    "is_polarized",
    "purchase_price",
)

SALE_FIELDS = ("sold_channel", "sold_quantity", "sold_at", "buyer_info", "allocations")

# snake_case attribute -> camelCase key of the stored JSON rows
_STORED_KEYS = {
    "id": "id",
    "name": "name",
    "brand": "brand",
    "model_code": "modelCode",
    "color_code": "colorCode",
    "size": "size",
    "ean": "ean",
    "gender": "gender",
    "images": "images",
    "lens_width": "lensWidth",
    "lens_height": "lensHeight",
    "temple_length": "templeLength",
    "bridge_size": "bridgeSize",
    "front_color": "frontColor",
    "front_material": "frontMaterial",
    "temple_material": "templeMaterial",
    "lens_color": "lensColor",
    "lens_material": "lensMaterial",
    "is_polarized": "isPolarized",
    "purchase_price": "purchasePrice",
    "channel_price": "storePrice",
    "quantity": "quantity",
    "has_channel_listing": "hasMarketplaceListing",
    "sold_quantity": "soldQuantity",
    "allocations": "allocations",
}


def new_record_id() -> str:
    return str(uuid.uuid4())


@dataclass
class StockRecord:
    """
    One row of the shop's record set.

    The same collection holds live stock rows (one per identity key and channel)
    and historical sale records; `status` tells them apart.
    """

    brand: str
    model_code: str
    color_code: str
    id: str = field(default_factory=new_record_id)
    name: str = ""
    ean: str = ""
    size: str = ""
    gender: Optional[str] = None
    images: list[str] = field(default_factory=list)

    # Dimensions (mm)
    lens_width: Optional[float] = None
    lens_height: Optional[float] = None
    temple_length: Optional[float] = None
    bridge_size: Optional[float] = None

    # Materials & characteristics
    front_color: Optional[str] = None
    front_material: Optional[str] = None
    temple_material: Optional[str] = None
    lens_color: Optional[str] = None
    lens_material: Optional[str] = None
    is_polarized: bool = False

    channel: Channel = Channel.INVENTORY
    quantity: int = 1
    status: RecordStatus = RecordStatus.LIVE

    # Sale ledger fields, set only on SOLD records
    sold_channel: Optional[Channel] = None
    sold_quantity: Optional[int] = None
    sold_at: Optional[datetime] = None
    buyer_info: Optional[BuyerInfoDTO] = None
    allocations: Optional[dict[str, int]] = None  # stock row id -> units taken by this sale

    has_channel_listing: bool = False
    purchase_price: float = 0.0
    channel_price: float = 0.0
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self) -> None:
        """Post-initialization for coercion and validation."""
        self.channel = Channel.parse(self.channel, default=Channel.INVENTORY)
        self.status = RecordStatus(self.status)
        if self.sold_channel is not None:
            self.sold_channel = Channel.parse(self.sold_channel)
        if isinstance(self.buyer_info, dict):
            self.buyer_info = BuyerInfoDTO.from_dict(self.buyer_info)
        if self.quantity is None or self.quantity < 0:
            raise ValueError("Quantity cannot be negative.")
        if self.purchase_price is not None and self.purchase_price < 0:
            raise ValueError("Purchase price cannot be negative.")
        if self.channel_price is not None and self.channel_price < 0:
            raise ValueError("Channel price cannot be negative.")

    @property
    def identity_key(self) -> IdentityKey:
        return IdentityKey(self.brand, self.model_code, self.color_code)

    @property
    def is_sale_record(self) -> bool:
        return self.status is RecordStatus.SOLD

    @property
    def is_stock_row(self) -> bool:
        """Live or exhausted row without sale history."""
        return self.status is not RecordStatus.SOLD

    @property
    def is_sold(self) -> bool:
        """Unavailable for sale: either a sale record or an exhausted row."""
        return self.status is not RecordStatus.LIVE

    @classmethod
    def new_intake(cls, **fields: Any) -> "StockRecord":
        """Builds a freshly registered physical-shop row."""
        fields.pop("id", None)
        fields.setdefault("channel", Channel.INVENTORY)
        if fields.get("quantity") is None:
            fields["quantity"] = 1
        fields["status"] = RecordStatus.LIVE if fields["quantity"] > 0 else RecordStatus.EXHAUSTED
        for name in SALE_FIELDS:
            fields.pop(name, None)
        return cls(**fields)

    def to_dict(self) -> dict[str, Any]:
        """Serializes to the stored camelCase layout."""
        data = {key: getattr(self, attr) for attr, key in _STORED_KEYS.items()}
        data["images"] = list(self.images)
        data["category"] = self.channel.value
        data["status"] = self.status.value
        data["isSold"] = self.is_sold
        data["soldPlatform"] = self.sold_channel.value if self.sold_channel else None
        data["soldAt"] = to_epoch_ms(self.sold_at)
        data["createdAt"] = to_epoch_ms(self.created_at)
        data["buyerInfo"] = self.buyer_info.to_dict() if self.buyer_info else None
        data["allocations"] = dict(self.allocations) if self.allocations is not None else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockRecord":
        """Creates a StockRecord from a stored row, migrating legacy layouts."""
        mapped_data = {attr: data.get(key) for attr, key in _STORED_KEYS.items() if data.get(key) is not None}

        if not mapped_data.get("images"):
            mapped_data["images"] = [data["imageUrl"]] if data.get("imageUrl") else []

        mapped_data["channel"] = Channel.parse(data.get("category"), default=Channel.INVENTORY)

        if not isinstance(data.get("quantity"), (int, float)) or isinstance(data.get("quantity"), bool):
            mapped_data["quantity"] = 1
        else:
            mapped_data["quantity"] = max(0, int(data["quantity"]))

        sold_platform = data.get("soldPlatform")
        if sold_platform:
            mapped_data["sold_channel"] = Channel.parse(sold_platform)

        if data.get("status"):
            mapped_data["status"] = RecordStatus(data["status"])
        elif data.get("isSold") and sold_platform:
            mapped_data["status"] = RecordStatus.SOLD
        elif data.get("isSold"):
            mapped_data["status"] = RecordStatus.EXHAUSTED
        else:
            mapped_data["status"] = RecordStatus.LIVE

        mapped_data["sold_at"] = from_epoch_ms(data.get("soldAt"))
        mapped_data["buyer_info"] = BuyerInfoDTO.from_dict(data.get("buyerInfo"))
        created_at = from_epoch_ms(data.get("createdAt"))
        if created_at is not None:
            mapped_data["created_at"] = created_at

        for attr in ("brand", "model_code", "color_code"):
            mapped_data.setdefault(attr, "")

        if not data.get("id"):
            logger.warning(f"Stored row without id for {mapped_data['brand']} {mapped_data['model_code']}, assigning one")

        valid_keys = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in mapped_data.items() if k in valid_keys})

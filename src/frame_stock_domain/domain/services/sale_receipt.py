"""Receipt data for a sale record. Rendering (PDF, barcode image) happens elsewhere."""

from src.common.dtos.stock_dtos import SaleReceiptDTO, SaleReceiptLineDTO
from src.common.exceptions.custom_exceptions import InvalidRecordStateError
from src.common.utils.date_utils import format_store_datetime
from src.frame_stock_domain.domain.entities.stock_record import StockRecord

DEFAULT_CUSTOMER_NAME = "Consumidor Final"


def _barcode(record: StockRecord) -> tuple[str, str]:
    ean = record.ean or ""
    value = ean if len(ean) > 8 else record.id[:12]
    barcode_format = "EAN13" if len(ean) in (12, 13) else "CODE128"
    return value, barcode_format


def build_sale_receipt(sale_record: StockRecord) -> SaleReceiptDTO:
    if not sale_record.is_sale_record:
        raise InvalidRecordStateError(f"Record {sale_record.id} is not a sale record", sale_record.id)

    quantity = sale_record.sold_quantity or 1
    unit_price = sale_record.channel_price or 0.0
    description = f"{sale_record.brand} {sale_record.model_code}"
    if sale_record.color_code:
        description += f" - {sale_record.color_code}"

    buyer = sale_record.buyer_info
    barcode_value, barcode_format = _barcode(sale_record)

    line = SaleReceiptLineDTO(
        quantity=quantity, description=description, unit_price=unit_price, total=unit_price * quantity
    )
    return SaleReceiptDTO(
        sale_id=sale_record.id,
        order_number=f"#{sale_record.id[:8].upper()}",
        sold_at=sale_record.sold_at,
        sold_at_display=format_store_datetime(sale_record.sold_at),
        sold_channel=sale_record.sold_channel.value if sale_record.sold_channel else "",
        customer_name=(buyer.name if buyer and buyer.name else DEFAULT_CUSTOMER_NAME),
        buyer=buyer,
        lines=[line],
        total=line.total,
        barcode_value=barcode_value,
        barcode_format=barcode_format,
    )

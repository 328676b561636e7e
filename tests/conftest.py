# tests/conftest.py
from datetime import datetime
from unittest.mock import Mock

import pytest
import pytz

from src.common.config.settings import settings
from src.common.dtos.stock_dtos import BuyerInfoDTO
from src.frame_stock_domain.application.frame_stock_service import FrameStockApplicationService
from src.frame_stock_domain.domain.entities.channel import Channel, RecordStatus
from src.frame_stock_domain.domain.entities.stock_record import StockRecord
from src.frame_stock_domain.domain.repositories.stock_record_repository import IStockRecordRepository


@pytest.fixture(autouse=True)
def mock_settings_store_info(mocker) -> None:
    """Pins timezone and pricing defaults so tests do not depend on the local .env."""
    mocker.patch.object(settings, "STORE_TIMEZONE", "America/Sao_Paulo")
    mocker.patch.object(settings, "PRICING_SHIPPING_FLAT", 26.94)
    mocker.patch.object(settings, "PRICING_DEFAULT_MARKUP", 2.0)
    mocker.patch.object(settings, "PRICING_DEFAULT_FEE_PERCENT", 10.0)
    mocker.patch.object(settings, "LEDGER_SIBLING_SCOPE", "all_channels")


@pytest.fixture
def ray_ban_inventory() -> StockRecord:
    """Physical-shop row of Ray-Ban RB3025 G-15 with five units."""
    return StockRecord(
        id="inv-rb3025",
        brand="Ray-Ban",
        model_code="RB3025",
        color_code="G-15",
        name="Aviator Classic G-15",
        ean="8053672000001",
        size="58",
        channel=Channel.INVENTORY,
        quantity=5,
        purchase_price=100.0,
        channel_price=450.0,
        created_at=datetime(2024, 3, 1, 12, 0, tzinfo=pytz.utc),
    )


@pytest.fixture
def ray_ban_shopee() -> StockRecord:
    """Shopee listing cloned from the inventory row."""
    return StockRecord(
        id="shp-rb3025",
        brand="Ray-Ban",
        model_code="RB3025",
        color_code="G-15",
        name="Aviator Classic G-15",
        ean="8053672000001",
        channel=Channel.SHOPEE,
        quantity=1,
        purchase_price=100.0,
        channel_price=246.94,
        has_channel_listing=True,
    )


@pytest.fixture
def oakley_inventory() -> StockRecord:
    return StockRecord(
        id="inv-oo9208",
        brand="Oakley",
        model_code="OO9208",
        color_code="01",
        name="Radar EV Path",
        ean="888392000000",
        channel=Channel.INVENTORY,
        quantity=2,
        purchase_price=300.0,
        channel_price=800.0,
    )


@pytest.fixture
def sample_records(ray_ban_inventory, ray_ban_shopee, oakley_inventory) -> list[StockRecord]:
    return [ray_ban_inventory, ray_ban_shopee, oakley_inventory]


@pytest.fixture
def sample_buyer() -> BuyerInfoDTO:
    return BuyerInfoDTO(
        name="Maria Souza",
        cpf="123.456.789-00",
        phone="(11) 99999-0000",
        cep="01310100",
        street="Avenida Paulista",
        number="1000",
        neighborhood="Bela Vista",
        city="São Paulo",
        state="SP",
    )


@pytest.fixture
def sample_sale_record(ray_ban_inventory, sample_buyer) -> StockRecord:
    return StockRecord(
        id="sale-0001-abcdef",
        brand="Ray-Ban",
        model_code="RB3025",
        color_code="G-15",
        name="Aviator Classic G-15",
        ean="8053672000001",
        channel=Channel.INVENTORY,
        quantity=2,
        status=RecordStatus.SOLD,
        sold_channel=Channel.INVENTORY,
        sold_quantity=2,
        sold_at=datetime(2024, 3, 10, 15, 30, tzinfo=pytz.utc),
        buyer_info=sample_buyer,
        allocations={"inv-rb3025": 2},
        purchase_price=100.0,
        channel_price=450.0,
        created_at=datetime(2024, 3, 1, 12, 0, tzinfo=pytz.utc),
    )


@pytest.fixture
def mock_stock_repository() -> Mock:
    """Mock for IStockRecordRepository."""
    return Mock(spec=IStockRecordRepository)


@pytest.fixture
def frame_stock_service(mock_stock_repository) -> FrameStockApplicationService:
    """Instance of FrameStockApplicationService with a mocked repository."""
    return FrameStockApplicationService(stock_repo=mock_stock_repository)

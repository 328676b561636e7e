"""Main application entry point: wires the frame stock ledger and reports the current stock."""

import logging

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError
from src.common.logger_config import setup_logging
from src.frame_stock_domain.application.frame_stock_service import FrameStockApplicationService
from src.frame_stock_domain.domain.entities.channel import Channel
from src.frame_stock_domain.domain.repositories.stock_record_repository import IStockRecordRepository
from src.frame_stock_domain.infrastructure.persistence.json_stock_record_repository import (
    JsonFileStockRecordRepository,
)
from src.frame_stock_domain.infrastructure.persistence.mysql_stock_record_repository import (
    MySQLStockRecordRepository,
)

logger = logging.getLogger(__name__)


def setup_stock_repository() -> IStockRecordRepository:
    """Picks the storage backend configured in settings."""
    backend = settings.STOCK_STORE_BACKEND.lower()
    if backend == "mysql":
        repository = MySQLStockRecordRepository()
        try:
            repository.create_tables()
            logger.info("✅ Database tables created/verified successfully")
        except DatabaseError as e:
            logger.error(f"❌ Error creating stock database tables: {e}")
            raise
        return repository
    if backend == "json":
        return JsonFileStockRecordRepository(settings.STOCK_JSON_PATH)
    raise ApplicationError(f"Unknown STOCK_STORE_BACKEND: {settings.STOCK_STORE_BACKEND}")


def setup_dependencies() -> FrameStockApplicationService:
    """Initializes and wires up frame stock dependencies."""
    return FrameStockApplicationService(stock_repo=setup_stock_repository())


def report_stock(service: FrameStockApplicationService) -> None:
    summary = service.get_stock_summary()

    logger.info("--- Available stock per channel ---")
    for channel in Channel:
        logger.info(
            f"  {channel.value:<13} {summary.available_units_by_channel[channel.value]:>5} units in "
            f"{summary.live_listings_by_channel[channel.value]} listings"
        )
    logger.info(f"  Exhausted rows: {summary.exhausted_rows}")

    logger.info("--- Sales ---")
    logger.info(f"  Physical: {summary.physical_sales_count} sales, {summary.physical_revenue:.2f}")
    logger.info(f"  Online:   {summary.online_sales_count} sales, {summary.online_revenue:.2f}")
    logger.info(f"  Units sold: {summary.units_sold}, total revenue: {summary.total_revenue:.2f}")

    unlisted = service.get_unlisted_inventory()
    if unlisted:
        logger.info(f"{len(unlisted)} inventory frames are not listed on any marketplace yet")


if __name__ == "__main__":
    setup_logging()
    logger.info(f"Frame stock ledger started ({settings.STOCK_STORE_BACKEND} backend)")

    try:
        report_stock(setup_dependencies())
    except ApplicationError as e:
        logger.error(f"An error occurred while reading the stock: {e}")

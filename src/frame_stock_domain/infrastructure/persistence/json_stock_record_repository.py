"""JSON file implementation of the stock record repository."""

import json
import logging
import os
import tempfile

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError
from src.frame_stock_domain.domain.entities.stock_record import StockRecord
from src.frame_stock_domain.domain.repositories.stock_record_repository import IStockRecordRepository

logger = logging.getLogger(__name__)


class JsonFileStockRecordRepository(IStockRecordRepository):
    """Keeps the whole record set as one JSON array on disk."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or settings.STOCK_JSON_PATH

    def load(self) -> list[StockRecord]:
        if not os.path.exists(self.path):
            logger.info(f"No stock file at {self.path}, starting with an empty record set")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except json.JSONDecodeError as e:
            raise DatabaseError(f"Error decoding stock file {self.path}", original_exception=e)
        except OSError as e:
            raise DatabaseError(f"Error reading stock file {self.path}", original_exception=e)

        if not isinstance(rows, list):
            raise DatabaseError(f"Invalid stock file format in {self.path}: expected a list")

        try:
            return [StockRecord.from_dict(row) for row in rows]
        except (ValueError, TypeError, AttributeError) as e:
            raise DatabaseError(f"Invalid stock row in {self.path}: {e}", original_exception=e)

    def save(self, records: list[StockRecord]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".stock-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([record.to_dict() for record in records], f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise DatabaseError(f"Error writing stock file {self.path}", original_exception=e)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug(f"Saved {len(records)} stock records to {self.path}")

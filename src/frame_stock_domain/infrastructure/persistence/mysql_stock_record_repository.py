# src/frame_stock_domain/infrastructure/persistence/mysql_stock_record_repository.py
"""MySQL implementation of the stock record repository."""

import json
import logging

import mysql.connector
from mysql.connector import Error

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError
from src.frame_stock_domain.domain.entities.stock_record import StockRecord
from src.frame_stock_domain.domain.repositories.stock_record_repository import IStockRecordRepository

logger = logging.getLogger(__name__)


class MySQLStockRecordRepository(IStockRecordRepository):
    """
    Stores the record set in one table. Scalar columns serve reporting
    queries; the `payload` column holds the full record and is what `load`
    reads back.
    """

    def __init__(self) -> None:
        """Initializes the repository."""
        self._connection = None

    def _get_connection(self):
        """Establishes or returns an active MySQL database connection."""
        if not self._connection or not self._connection.is_connected():
            try:
                self._connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,  # save() replaces the set in one transaction
                    charset="utf8mb4",
                    use_unicode=True,
                )
            except Error as e:
                raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)
        return self._connection

    def create_tables(self) -> None:
        """Creates the stock record table with 'osl_' prefix."""
        create_stock_records_table_query = """
        CREATE TABLE IF NOT EXISTS osl_stock_records (
            id VARCHAR(36) PRIMARY KEY,
            position INT UNSIGNED NOT NULL,
            brand VARCHAR(255) NOT NULL,
            model_code VARCHAR(255) NOT NULL,
            color_code VARCHAR(255) NOT NULL,
            ean VARCHAR(32),
            channel VARCHAR(32) NOT NULL,
            status VARCHAR(16) NOT NULL,
            quantity INT UNSIGNED NOT NULL,
            sold_channel VARCHAR(32),
            sold_quantity INT UNSIGNED,
            sold_at DATETIME,
            channel_price DECIMAL(12, 2),
            payload JSON NOT NULL,
            date_synced DATETIME DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_identity_key (brand, model_code, color_code),
            INDEX idx_channel_status (channel, status),
            INDEX idx_sold_channel (sold_channel)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_stock_records_table_query)
            conn.commit()
            logger.info("OSL stock records table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating OSL stock records table: {e}", original_exception=e)
        finally:
            cursor.close()

    def load(self) -> list[StockRecord]:
        """Loads every record in stored order."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)

        try:
            cursor.execute("SELECT payload FROM osl_stock_records ORDER BY position")
            rows = cursor.fetchall()
        except Error as e:
            raise DatabaseError(f"Error loading stock records: {e}", original_exception=e)
        finally:
            cursor.close()

        records = []
        for row in rows:
            payload = row["payload"]
            if isinstance(payload, (bytes, bytearray)):
                payload = payload.decode("utf-8")
            try:
                data = json.loads(payload) if isinstance(payload, str) else payload
                records.append(StockRecord.from_dict(data))
            except (ValueError, TypeError) as e:
                raise DatabaseError(f"Corrupt stock record payload: {e}", original_exception=e)
        return records

    def save(self, records: list[StockRecord]) -> None:
        """Replaces the stored set in a single transaction."""
        conn = self._get_connection()
        cursor = conn.cursor()

        insert_query = """
        INSERT INTO osl_stock_records
        (id, position, brand, model_code, color_code, ean, channel, status, quantity,
         sold_channel, sold_quantity, sold_at, channel_price, payload)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params_list = [
            (
                record.id,
                position,
                record.brand,
                record.model_code,
                record.color_code,
                record.ean or None,
                record.channel.value,
                record.status.value,
                record.quantity,
                record.sold_channel.value if record.sold_channel else None,
                record.sold_quantity,
                record.sold_at.strftime("%Y-%m-%d %H:%M:%S") if record.sold_at else None,
                record.channel_price,
                json.dumps(record.to_dict(), ensure_ascii=False),
            )
            for position, record in enumerate(records)
        ]

        try:
            cursor.execute("DELETE FROM osl_stock_records")
            if params_list:
                cursor.executemany(insert_query, params_list)
            conn.commit()
            logger.info(f"Saved {len(records)} stock records")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error saving stock records: {e}", original_exception=e)
        finally:
            cursor.close()

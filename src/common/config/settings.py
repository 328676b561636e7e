"""Application settings and environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_DATABASE: str = os.getenv("DB_NAME", "optical_stock_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # Where the full record set lives: "json" or "mysql"
    STOCK_STORE_BACKEND: str = os.getenv("STOCK_STORE_BACKEND", "json")
    STOCK_JSON_PATH: str = os.getenv("STOCK_JSON_PATH", "data/optiRegistryFrames.json")

    STORE_TIMEZONE: str = os.getenv("STORE_TIMEZONE", "America/Sao_Paulo")

    # Pricing screen defaults
    PRICING_SHIPPING_FLAT: float = float(os.getenv("PRICING_SHIPPING_FLAT", "26.94"))
    PRICING_DEFAULT_MARKUP: float = float(os.getenv("PRICING_DEFAULT_MARKUP", "2.0"))
    PRICING_DEFAULT_FEE_PERCENT: float = float(os.getenv("PRICING_DEFAULT_FEE_PERCENT", "10"))

    # "all_channels" or "same_channel"
    LEDGER_SIBLING_SCOPE: str = os.getenv("LEDGER_SIBLING_SCOPE", "all_channels")

    VIACEP_API_BASE_URL: str = os.getenv("VIACEP_API_BASE_URL", "https://viacep.com.br/ws")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL


settings = Settings()

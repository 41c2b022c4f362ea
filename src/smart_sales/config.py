from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./smart_sales.db"
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    DEFAULT_TABLE_IDS: List[str] = ["table1", "table2", "table3", "table4", "table5", "table6"]
    LOW_STOCK_THRESHOLD: int = 10
    STOCK_UPDATE_RETRIES: int = 3
    DROP_MISSING_CART_ITEMS: bool = True
    RECENT_ORDERS_LIMIT: int = 5
    TOP_ENTRIES_LIMIT: int = 5

    class Config:
        env_file = ".env"

settings = Settings()

"""
db/init_db.py
-------------
Creates the key-value tables if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from psycopg2 import sql

from db.connection import connection
from utils.logger import get_logger

logger = get_logger(__name__)

# One table per namespace: subscriber records and the quote catalog cache
USER_STORAGE_TABLE = "user_storage"
QUOTES_CACHE_TABLE = "quotes_cache"

_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    key             TEXT PRIMARY KEY,
    value           TEXT NOT NULL,
    expires_at      TIMESTAMPTZ,
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS {index} ON {table}(expires_at) WHERE expires_at IS NOT NULL;
"""


def create_tables() -> None:
    """
    Create every key-value table.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with connection() as conn:
        try:
            with conn.cursor() as cur:
                for table in (USER_STORAGE_TABLE, QUOTES_CACHE_TABLE):
                    cur.execute(sql.SQL(_TABLE_SQL).format(
                        table=sql.Identifier(table),
                        index=sql.Identifier(f"idx_{table}_expires"),
                    ))
            conn.commit()
            logger.info("Database schema initialized successfully.")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to initialize schema: {e}")
            raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")

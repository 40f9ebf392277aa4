"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Singers table: one row per singer, keyed by a caller-supplied id
CREATE TABLE IF NOT EXISTS singers (
    singer_id       BIGINT PRIMARY KEY,
    first_name      VARCHAR(1024),
    last_name       VARCHAR(1024),
    singer_info     BYTEA,
    birth_date      DATE
);

CREATE INDEX IF NOT EXISTS idx_singers_birth_date ON singers(birth_date);
"""

DROP_SQL = "DROP TABLE IF EXISTS singers;"


def _execute(db: Database, sql: str) -> None:
    with db.connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql)
        conn.commit()


def create_tables(db: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        _execute(db, SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


def drop_tables(db: Database) -> None:
    """Drop every table created by `create_tables`."""
    try:
        _execute(db, DROP_SQL)
        logger.info("Database schema dropped.")
    except Exception as e:
        logger.error(f"Failed to drop schema: {e}")
        raise


if __name__ == "__main__":
    database = Database()
    try:
        create_tables(database)
    finally:
        database.close()
    print("Database schema created successfully.")

"""
repositories/singer_repo.py
---------------------------
Data access layer for singers.
All SQL queries related to the `singers` table live here.
"""

from typing import List, Optional

import psycopg2
from psycopg2 import errors

from db.connection import Database
from models.singer import CreatePayload, FilterPayload, Singer
from repositories.exceptions import (
    BadValueError,
    DuplicateError,
    NotFoundError,
    UnknownError,
)
from repositories.singer_query import SELECT_SQL, build_filter_query
from repositories.singer_row import COLUMNS, TABLE_NAME, SingerRow
from utils.logger import get_logger

logger = get_logger(__name__)

INSERT_SQL = (
    f"INSERT INTO {TABLE_NAME} ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join(f'%({c})s' for c in COLUMNS)});"
)
GET_SQL = SELECT_SQL + " WHERE singer_id = %(singer_id)s;"


class SingerRepository:
    """
    Create, list and get singers.

    Holds nothing but the injected `Database`, so one instance can be
    shared between threads. Each call runs in its own short transaction
    and nothing is retried; every failure surfaces as a `SingerError`.
    """

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    def create(self, payload: CreatePayload, timeout: Optional[float] = None) -> None:
        """
        Insert a new singer.

        Args:
            payload: The singer to store.
            timeout: Deadline in seconds (default: the pool's statement timeout).

        Raises:
            BadValueError: If the payload cannot be encoded.
            DuplicateError: If a singer with the same id exists.
            UnknownError: For any other storage failure.
        """
        try:
            row = SingerRow.from_payload(payload)
        except BadValueError as e:
            logger.error(f"Rejected singer #{payload.singer_id}: {e}")
            raise

        try:
            with self.db.connection(timeout) as conn:
                with conn.cursor() as cur:
                    cur.execute(INSERT_SQL, row.as_params())
                conn.commit()
        except errors.UniqueViolation as e:
            logger.warning(f"Singer #{row.singer_id} already exists")
            raise DuplicateError(f"Singer #{row.singer_id} already exists", cause=e) from e
        except psycopg2.Error as e:
            logger.error(f"Failed to add singer #{row.singer_id}: {e}")
            raise UnknownError(f"Failed to add singer #{row.singer_id}: {e}", cause=e) from e

        logger.info(f"Added singer #{row.singer_id}")

    # ── READ ──────────────────────────────────────────────

    def list(
        self, filter: Optional[FilterPayload] = None, timeout: Optional[float] = None
    ) -> List[Singer]:
        """
        Fetch every singer matching all conditions of a filter.

        Args:
            filter: Conditions to apply (default: none, i.e. all singers).
            timeout: Deadline in seconds (default: the pool's statement timeout).

        Returns:
            List of Singer objects, empty when nothing matches. Order is
            whatever the database returns.

        Raises:
            BadValueError: If the filter is invalid or any matching row is corrupt.
            UnknownError: For any storage failure.
        """
        try:
            sql, params = build_filter_query(filter or FilterPayload())
        except TypeError as e:
            logger.error(f"Invalid singer filter: {e}")
            raise BadValueError(f"Invalid singer filter: {e}", cause=e) from e

        singers: List[Singer] = []
        try:
            with self.db.connection(timeout) as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    for record in cur:
                        singers.append(SingerRow.from_db(record).to_singer())
        except BadValueError as e:
            logger.error(f"Corrupt singer row while listing: {e}")
            raise
        except psycopg2.Error as e:
            logger.error(f"Failed to list singers: {e}")
            raise UnknownError(f"Failed to list singers: {e}", cause=e) from e

        logger.debug(f"Listed {len(singers)} singer(s)")
        return singers

    def get(self, singer_id: int, timeout: Optional[float] = None) -> Singer:
        """
        Fetch a single singer by id.

        Args:
            singer_id: Primary key.
            timeout: Deadline in seconds (default: the pool's statement timeout).

        Returns:
            The Singer.

        Raises:
            NotFoundError: If no singer has this id.
            BadValueError: If the stored row is corrupt.
            UnknownError: For any storage failure.
        """
        try:
            with self.db.connection(timeout) as conn:
                with conn.cursor() as cur:
                    cur.execute(GET_SQL, {"singer_id": singer_id})
                    record = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to get singer #{singer_id}: {e}")
            raise UnknownError(f"Failed to get singer #{singer_id}: {e}", cause=e) from e

        if record is None:
            logger.warning(f"Singer #{singer_id} not found")
            raise NotFoundError(f"Singer #{singer_id} not found")

        try:
            return SingerRow.from_db(record).to_singer()
        except BadValueError as e:
            logger.error(f"Corrupt singer row #{singer_id}: {e}")
            raise

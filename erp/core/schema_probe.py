"""
Schema Capability Probe

Deployments carry slightly different shapes of the ``orders`` and
``inventory_movements`` tables (legacy total columns, optional status and
actor columns). The probe reads the catalog once per table and lets the
services build statements from what is actually there.
"""
import logging
import threading
from functools import lru_cache
from typing import AbstractSet, Dict, FrozenSet, Optional

from sqlalchemy import MetaData, column, inspect, literal_column, table
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.expression import TableClause

from .database import Base
from .errors import SchemaProbeError

logger = logging.getLogger(__name__)

# Priority order for the column that stores an order's grand total
ORDER_TOTAL_COLUMNS = ("total", "total_amount", "grand_total", "amount")

ACTOR_COLUMNS = ("user_id", "created_by")


class ColumnCache:
    """Table name -> column names, filled on first lookup and kept for the
    life of the process. The schema is assumed static, so there is no
    invalidation."""

    def __init__(self):
        self._columns: Dict[str, FrozenSet[str]] = {}
        self._lock = threading.Lock()

    def get(self, table_name: str) -> Optional[FrozenSet[str]]:
        with self._lock:
            return self._columns.get(table_name)

    def put(self, table_name: str, columns: FrozenSet[str]) -> None:
        with self._lock:
            self._columns.setdefault(table_name, columns)

    def __contains__(self, table_name: str) -> bool:
        with self._lock:
            return table_name in self._columns

    def __len__(self) -> int:
        with self._lock:
            return len(self._columns)


class SchemaProbe:
    """Answers which optional columns exist in the connected database."""

    def __init__(self, cache: Optional[ColumnCache] = None, metadata: Optional[MetaData] = None):
        self.cache = cache if cache is not None else ColumnCache()
        self.metadata = metadata

    def columns_of(self, db: Session, table_name: str) -> FrozenSet[str]:
        cached = self.cache.get(table_name)
        if cached is not None:
            return cached

        try:
            inspector = inspect(db.connection())
            columns = frozenset(col["name"] for col in inspector.get_columns(table_name))
        except NoSuchTableError:
            columns = frozenset()
        except SQLAlchemyError as e:
            logger.error(f"Schema probe failed for table {table_name}: {e}")
            raise SchemaProbeError(f"Could not read columns of table {table_name}") from e

        self.cache.put(table_name, columns)
        logger.debug(f"Probed {table_name}: {sorted(columns)}")
        return columns

    def supports(self, db: Session, table_name: str, column_name: str) -> bool:
        return column_name in self.columns_of(db, table_name)

    def table(self, db: Session, table_name: str) -> TableClause:
        """Lightweight table holding only the columns that exist.

        Column types come from the declarative metadata when the column is
        known there, so results get the usual Decimal/datetime processing.
        """
        known = self.metadata.tables.get(table_name) if self.metadata is not None else None
        cols = []
        for name in sorted(self.columns_of(db, table_name)):
            if known is not None and name in known.c:
                cols.append(column(name, known.c[name].type))
            else:
                cols.append(column(name))
        return table(table_name, *cols)

    def actor_column(self, db: Session, table_name: str) -> Optional[str]:
        columns = self.columns_of(db, table_name)
        for name in ACTOR_COLUMNS:
            if name in columns:
                return name
        return None


def resolve_order_total_column(columns: AbstractSet[str]) -> Optional[str]:
    """Column an order's total is written into, if the table stores one."""
    for name in ORDER_TOTAL_COLUMNS:
        if name in columns:
            return name
    return None


def resolve_order_total_expression(columns: AbstractSet[str], orders: TableClause) -> ColumnElement:
    """SQL expression that reads an order's total back.

    ``orders`` must expose every name in ``columns``.
    """
    name = resolve_order_total_column(columns)
    if name is not None:
        return orders.c[name]
    if "subtotal" in columns and "tax" in columns:
        return orders.c.subtotal + orders.c.tax
    if "subtotal" in columns:
        return orders.c.subtotal
    return literal_column("0")


@lru_cache()
def get_schema_probe() -> SchemaProbe:
    return SchemaProbe(metadata=Base.metadata)

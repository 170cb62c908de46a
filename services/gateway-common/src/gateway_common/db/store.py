from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Any, AsyncIterator, Iterable, Optional

from sqlalchemy import Column, Table, insert, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from gateway_common.errors import ConflictError, GatewayError, NotFoundError, StoreError
from gateway_common.metrics import STORE_OPERATION_SECONDS, STORE_OPERATIONS_TOTAL
from gateway_common.models import Base

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
IDENTITY_FIELDS = ("id", "user_id")


def _sqlstate(error: IntegrityError) -> Optional[str]:
    """Dig the SQLSTATE out of a wrapped DBAPI error."""
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        for attr in ("pgcode", "sqlstate"):
            code = getattr(candidate, attr, None)
            if code:
                return code
    return None


class RecordStore:
    """Table-addressed client for the relational store.

    Every operation opens its own session, issues a single statement and
    returns plain dict rows. Failures leave this class as one of the
    gateway error kinds:

        NotFoundError  -- a point lookup matched zero rows
        ConflictError  -- an upsert violated a unique constraint
        StoreError     -- anything else, including transport failures

    Example:
        ```python
        store = RecordStore.from_url("postgresql+asyncpg://user:pw@db/app")
        token = await store.lookup_one("tokens", "user_id", "u1")
        await store.dispose()
        ```
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ) -> None:
        self.session_maker = session_maker
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "RecordStore":
        engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        return cls(session_maker, engine)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table: {name}")
        return table

    def _column(self, table: Table, name: str) -> Column:
        if name not in table.c:
            raise StoreError(f"Unknown column {name} on table {table.name}")
        return table.c[name]

    def _columns(self, table: Table, names: Optional[Iterable[str]]) -> list[Column]:
        if names is None:
            return list(table.c)
        return [self._column(table, name) for name in names]

    @asynccontextmanager
    async def _operation(self, table: str, operation: str, conflict: bool = False) -> AsyncIterator[None]:
        """Time an operation and translate store exceptions into gateway errors."""
        outcome = "success"
        try:
            with STORE_OPERATION_SECONDS.labels(table, operation).time():
                yield
        except NotFoundError:
            outcome = "not_found"
            raise
        except GatewayError:
            outcome = "error"
            raise
        except NoResultFound as e:
            outcome = "not_found"
            logger.debug(f"No rows matched {operation} on {table}")
            raise NotFoundError(f"No rows found in {table}") from e
        except IntegrityError as e:
            if conflict and _sqlstate(e) == UNIQUE_VIOLATION:
                outcome = "conflict"
                logger.warning(f"Unique constraint violated by {operation} on {table}: {e.orig}")
                raise ConflictError(str(e.orig)) from e
            outcome = "error"
            logger.error(f"Integrity error during {operation} on {table}: {e.orig}")
            raise StoreError(str(e.orig)) from e
        except (SQLAlchemyError, OSError) as e:
            outcome = "error"
            logger.error(f"Store error during {operation} on {table}: {str(e)}")
            raise StoreError(str(e)) from e
        finally:
            STORE_OPERATIONS_TOTAL.labels(table, operation, outcome).inc()

    async def select_all(self, table_name: str, columns: Optional[Iterable[str]] = None) -> list[dict[str, Any]]:
        """Return every row of a table."""
        async with self._operation(table_name, "select"):
            table = self._table(table_name)
            stmt = select(*self._columns(table, columns))
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return [dict(row) for row in result.mappings().all()]

    async def insert(self, table_name: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored, generated columns included."""
        async with self._operation(table_name, "insert"):
            table = self._table(table_name)
            stmt = insert(table).values(record).returning(*table.c)
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                row = dict(result.mappings().one())
                await session.commit()
                return row

    async def lookup_one(
        self,
        table_name: str,
        key: str,
        value: Any,
        columns: Optional[Iterable[str]] = None,
    ) -> dict[str, Any]:
        """Fetch the single row where key == value.

        Raises:
            NotFoundError: No row matched.
            StoreError: More than one row matched, or the store failed.
        """
        async with self._operation(table_name, "lookup"):
            table = self._table(table_name)
            stmt = select(*self._columns(table, columns)).where(self._column(table, key) == value)
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return dict(result.mappings().one())

    async def find_one(
        self,
        table_name: str,
        key: str,
        value: Any,
        columns: Optional[Iterable[str]] = None,
    ) -> Optional[dict[str, Any]]:
        """Like lookup_one, but zero rows is None rather than an error."""
        async with self._operation(table_name, "lookup"):
            table = self._table(table_name)
            stmt = select(*self._columns(table, columns)).where(self._column(table, key) == value)
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                row = result.mappings().one_or_none()
                return dict(row) if row is not None else None

    async def partial_update(
        self,
        table_name: str,
        key: str,
        value: Any,
        patch: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Apply a partial update to the rows where key == value.

        Identity columns are dropped from the patch and updated_at is
        stamped here. Returns the affected rows, which may be empty.
        """
        values = {
            name: field
            for name, field in patch.items()
            if name not in IDENTITY_FIELDS and name != key
        }

        async with self._operation(table_name, "update"):
            table = self._table(table_name)
            if "updated_at" in table.c:
                values["updated_at"] = datetime.now(timezone.utc)
            stmt = (
                update(table)
                .where(self._column(table, key) == value)
                .values(values)
                .returning(*table.c)
            )
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                rows = [dict(row) for row in result.mappings().all()]
                await session.commit()
                return rows

    async def upsert(self, table_name: str, unique_key: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row, or replace the row that already holds unique_key.

        Raises:
            ConflictError: The write violated a unique constraint.
            StoreError: The store returned no row, or failed.
        """
        async with self._operation(table_name, "upsert", conflict=True):
            table = self._table(table_name)
            self._column(table, unique_key)
            stmt = pg_insert(table).values(record)
            replaced = {name: stmt.excluded[name] for name in record if name != unique_key}
            if replaced:
                stmt = stmt.on_conflict_do_update(index_elements=[unique_key], set_=replaced)
            else:
                stmt = stmt.on_conflict_do_nothing(index_elements=[unique_key])
            stmt = stmt.returning(*table.c)

            async with self.session_maker() as session:
                result = await session.execute(stmt)
                row = result.mappings().one_or_none()
                if row is None:
                    raise StoreError(f"Failed to upsert {table_name} row")
                row = dict(row)
                await session.commit()
                return row

    async def ping(self) -> None:
        async with self._operation("-", "ping"):
            async with self.session_maker() as session:
                await session.execute(text("SELECT 1"))

"""
Thin table-oriented data access used by repos and services.

Every call runs in its own short transaction. Database failures surface as
StoreError with the postgres-style code when one can be recovered, so callers
can branch on UNIQUE_VIOLATION / UNDEFINED_COLUMN without knowing the driver.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import StoreError, UNDEFINED_COLUMN, UNDEFINED_TABLE, UNIQUE_VIOLATION

Row = Dict[str, Any]
Filters = Optional[Mapping[str, Any]]
RpcFn = Callable[..., Any]


def _error_code(exc: BaseException) -> Optional[str]:
    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)
    msg = str(orig).lower()
    if "unique constraint" in msg or "duplicate key" in msg:
        return UNIQUE_VIOLATION
    if "no such column" in msg or "has no column named" in msg:
        return UNDEFINED_COLUMN
    if "no such table" in msg:
        return UNDEFINED_TABLE
    return None


def contains(column: sa.ColumnElement, needle: str) -> sa.ColumnElement:
    """Case-insensitive substring match with LIKE wildcards escaped."""
    escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


class Store:
    def __init__(self, engine: Engine, metadata: sa.MetaData):
        self.engine = engine
        self.metadata = metadata
        self._rpcs: Dict[str, RpcFn] = {}

    # -- plumbing ---------------------------------------------------------
    def table(self, name: str) -> sa.Table:
        try:
            return self.metadata.tables[name]
        except KeyError:
            raise StoreError(f'relation "{name}" does not exist', code=UNDEFINED_TABLE) from None

    def column(self, table: Union[str, sa.Table], name: str) -> sa.Column:
        t = self.table(table) if isinstance(table, str) else table
        try:
            return t.c[name]
        except KeyError:
            raise StoreError(
                f'column "{name}" of relation "{t.name}" does not exist', code=UNDEFINED_COLUMN
            ) from None

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as cx:
                yield cx
        except IntegrityError as exc:
            raise StoreError(str(exc.orig), code=_error_code(exc) or UNIQUE_VIOLATION) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(getattr(exc, "orig", None) or exc), code=_error_code(exc)) from exc

    def _clauses(self, t: sa.Table, filters: Filters, where: Iterable[Any]) -> List[Any]:
        clauses: List[Any] = []
        for key, value in (filters or {}).items():
            col = self.column(t, key)
            clauses.append(col.is_(None) if value is None else col == value)
        clauses.extend(where)
        return clauses

    # -- table operations -------------------------------------------------
    def select(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Filters = None,
        where: Iterable[Any] = (),
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        t = self.table(table)
        cols = [self.column(t, c) for c in columns] if columns else list(t.c)
        stmt = sa.select(*cols)
        clauses = self._clauses(t, filters, where)
        if clauses:
            stmt = stmt.where(*clauses)
        if order:
            col = self.column(t, order)
            stmt = stmt.order_by(col.desc() if desc else col.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.begin() as cx:
            return [dict(r) for r in cx.execute(stmt).mappings()]

    def _batch(self, t: sa.Table, rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> List[Row]:
        batch = [dict(rows)] if isinstance(rows, Mapping) else [dict(r) for r in rows]
        for row in batch:
            for key in row:
                self.column(t, key)
        return batch

    def insert(
        self,
        table: str,
        rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        columns: Optional[Sequence[str]] = None,
    ) -> List[Row]:
        """
        Insert one or many rows in a single transaction and return them as
        stored. `columns` narrows the read-back to the listed columns.
        """
        t = self.table(table)
        batch = self._batch(t, rows)
        cols = [self.column(t, c) for c in columns] if columns else list(t.c)
        pk = list(t.primary_key.columns)
        out: List[Row] = []
        with self.begin() as cx:
            for row in batch:
                res = cx.execute(t.insert().values(**row))
                keys = res.inserted_primary_key
                stmt = sa.select(*cols).where(*[col == keys[i] for i, col in enumerate(pk)])
                stored = cx.execute(stmt).mappings().first()
                out.append(dict(stored) if stored is not None else row)
        return out

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters = None, where: Iterable[Any] = ()) -> int:
        t = self.table(table)
        values = {self.column(t, k).name: v for k, v in patch.items()}
        clauses = self._clauses(t, filters, where)
        if not clauses:
            raise StoreError(f"refusing unfiltered update on {t.name}")
        with self.begin() as cx:
            return cx.execute(t.update().where(*clauses).values(**values)).rowcount

    def delete(self, table: str, filters: Filters = None, where: Iterable[Any] = ()) -> int:
        t = self.table(table)
        clauses = self._clauses(t, filters, where)
        if not clauses:
            raise StoreError(f"refusing unfiltered delete on {t.name}")
        with self.begin() as cx:
            return cx.execute(t.delete().where(*clauses)).rowcount

    def replace(self, table: str, rows: Sequence[Mapping[str, Any]]) -> int:
        """Swap the whole table content for `rows`; readers see old or new rows, never neither."""
        t = self.table(table)
        batch = self._batch(t, rows)
        with self.begin() as cx:
            cx.execute(t.delete())
            if batch:
                cx.execute(t.insert(), batch)
        return len(batch)

    def count(self, table: str, filters: Filters = None, where: Iterable[Any] = ()) -> int:
        t = self.table(table)
        stmt = sa.select(sa.func.count()).select_from(t)
        clauses = self._clauses(t, filters, where)
        if clauses:
            stmt = stmt.where(*clauses)
        with self.begin() as cx:
            return int(cx.execute(stmt).scalar() or 0)

    # -- stored procedures ------------------------------------------------
    def register_rpc(self, name: str, fn: RpcFn) -> None:
        self._rpcs[name] = fn

    def rpc(self, name: str, **params: Any) -> Any:
        fn = self._rpcs.get(name)
        if fn is None:
            raise StoreError(f"function {name} does not exist", code="42883")
        return fn(self, **params)

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path
from typing import Any, List, Optional

import duckdb

from src.tabular.result_set import ResultSet

log = logging.getLogger("chartview.engine")

DEFAULT_TABLE = "uploaded"
DEFAULT_ROW_LIMIT = 1000

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class QueryError(RuntimeError):
    """DuckDB rejected or failed to run a statement."""


def initial_result_set() -> ResultSet:
    """Seed data shown before anything is uploaded or queried."""
    return ResultSet.from_rows(["id", "name"], [[1, "Alice"], [2, "Bob"], [3, "Charlie"]])


def unique_column_names(names: List[str]) -> List[str]:
    """Suffix repeated names (`id`, `id_1`, ...) so joins yield distinct columns."""
    taken = set(names)
    seen: set = set()
    out: List[str] = []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
            continue
        k = 1
        while f"{n}_{k}" in taken or f"{n}_{k}" in seen:
            k += 1
        cand = f"{n}_{k}"
        seen.add(cand)
        out.append(cand)
    return out


def _check_ident(name: str) -> str:
    if not _IDENT_RE.match(name or ""):
        raise ValueError(f"invalid table name {name!r}")
    return name


class QueryEngine:
    """
    Embedded DuckDB connection that turns CSV uploads and SQL text into ResultSets.
    Each call returns a fresh ResultSet; nothing is merged across calls.
    """

    def __init__(self, database: str = ":memory:", *, row_limit: int = DEFAULT_ROW_LIMIT, table: str = DEFAULT_TABLE):
        if row_limit < 1:
            raise ValueError("row_limit must be >= 1")
        self.database = database
        self.row_limit = int(row_limit)
        self.table = _check_ident(table)
        self._conn: Optional[duckdb.DuckDBPyConnection] = duckdb.connect(database)

    @classmethod
    def from_config(cls, cfg: Any) -> "QueryEngine":
        d = cfg.duckdb
        return cls(d.database, row_limit=d.row_limit, table=d.table)

    # ---------------------------- lifecycle ----------------------------

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise QueryError("engine is closed")
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "QueryEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------------------------- queries ----------------------------

    def _run(self, sql: str, params: Optional[list] = None) -> duckdb.DuckDBPyConnection:
        try:
            return self.conn.execute(sql, params or [])
        except duckdb.Error as e:
            log.error("query failed", extra={"sql": sql, "error": str(e)})
            raise QueryError(str(e)) from e

    def query(self, sql: str) -> ResultSet:
        """Run SQL as-is and materialize the full result."""
        cur = self._run(sql)
        if cur.description is None:
            # DDL/DML without a result set
            return ResultSet(columns=())
        columns = unique_column_names([d[0] for d in cur.description])
        rows = cur.fetchall()
        rs = ResultSet.from_rows(columns, rows)
        log.info("query executed", extra={"rows": rs.row_count, "columns": list(rs.columns)})
        return rs

    def load_csv(self, path: str | Path, table: Optional[str] = None) -> ResultSet:
        """Replace `table` with the CSV contents and return its first row_limit rows."""
        t = _check_ident(self.table if table is None else table)
        src = str(Path(path).resolve())
        self._run(f"DROP TABLE IF EXISTS {t}")
        literal = src.replace("'", "''")
        self._run(f"CREATE TABLE {t} AS SELECT * FROM read_csv_auto('{literal}')")
        log.info("loaded csv", extra={"table": t, "path": src})
        return self.query(f"SELECT * FROM {t} LIMIT {self.row_limit}")

    def load_csv_bytes(self, data: bytes, name: str = "upload.csv", table: Optional[str] = None) -> ResultSet:
        """Load an uploaded buffer by spilling it to a temporary file."""
        suffix = Path(name).suffix or ".csv"
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / f"upload{suffix}"
            p.write_bytes(data)
            return self.load_csv(p, table=table)

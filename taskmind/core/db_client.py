"""SQLite database client wrapper with CRUD operations."""

import asyncio
import json
import logging
import re
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from taskmind.core.config import constants, settings
from taskmind.core.errors import NotFoundError


logger = logging.getLogger(__name__)

# Columns holding JSON-encoded lists
_JSON_COLUMNS = {"dates_completed", "completed_task_ids", "completion_history"}

# Columns stored as INTEGER 0/1
_BOOL_COLUMNS = {"is_completed"}

# Columns stored as INTEGER counters or keys
_INT_COLUMNS = {"id", "total_completions", "current_streak", "longest_streak", "tasks_completed", "streak_count"}


class DatabaseError(RuntimeError):
    """Raised when a database operation fails."""


class RecordNotFoundError(NotFoundError):
    """Raised when a record does not exist."""


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def sanitize_param(value: str | int | float | bool | None) -> str:
    """Escape a value for safe embedding in filter queries via json.dumps."""
    return json.dumps(str(value))[1:-1]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _decode_record(record: dict[str, Any]) -> dict[str, Any]:
    """Convert SQLite row values to the shapes the domain models expect."""
    decoded = record.copy()
    for key, value in decoded.items():
        if key == "id" or key.endswith("_id"):
            if isinstance(value, int):
                decoded[key] = str(value)
        elif key in _JSON_COLUMNS:
            decoded[key] = json.loads(value) if value else []
        elif key in _BOOL_COLUMNS and value is not None:
            decoded[key] = bool(value)
    return decoded


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


# One comparison: field, operator, quoted value (backslash escapes allowed), then `&&` or the end
_COMPARISON_RE = re.compile(
    r"""\s*(?P<field>\w+)\s*(?P<op>!=|>=|<=|=|>|<|~)\s*"""
    r"""(?:"(?P<dq>(?:[^"\\]|\\.)*)"|'(?P<sq>(?:[^'\\]|\\.)*)')"""
    r"""\s*(?P<join>&&|\Z)""",
    re.DOTALL,
)


def _unescape(match: re.Match[str]) -> str:
    """Undo the escaping sanitize_param applies to a quoted filter value."""
    if match.group("dq") is not None:
        try:
            return json.loads(f'"{match.group("dq")}"')
        except json.JSONDecodeError as e:
            msg = f"Invalid filter syntax: bad escape in {match.group(0).strip()}"
            raise ValueError(msg) from e
    return re.sub(r"\\(.)", r"\1", match.group("sq"), flags=re.DOTALL)


def parse_conditions(filter_query: str) -> list[tuple[str, str, str]]:
    """Split `field = "value" && ...` into (field, operator, value) triples.

    Values come back unescaped and always as text; `&&` inside a quoted value
    does not split it.
    """
    conditions = []
    pos = 0
    while True:
        match = _COMPARISON_RE.match(filter_query, pos)
        if not match:
            msg = f"Invalid filter syntax: {filter_query[pos:].strip() or filter_query}"
            raise ValueError(msg)

        conditions.append((match.group("field"), match.group("op"), _unescape(match)))
        pos = match.end()
        if not match.group("join"):
            return conditions


def _typed_value(field: str, value: str) -> str | int:
    """Bind a filter value with the type its column stores; every other column compares as text."""
    if field in _BOOL_COLUMNS:
        if value.lower() not in ("true", "false"):
            msg = f"Invalid boolean for {field}: {value}"
            raise ValueError(msg)
        return int(value.lower() == "true")

    if field in _INT_COLUMNS:
        try:
            return int(value)
        except ValueError as e:
            msg = f"Invalid integer for {field}: {value}"
            raise ValueError(msg) from e

    return value


def _get_sql_operator(op: str) -> str:
    """Map filter operator to SQL operator."""
    op_map = {
        "=": "=",
        "!=": "!=",
        ">": ">",
        "<": "<",
        ">=": ">=",
        "<=": "<=",
        "~": "LIKE",
    }
    sql_op = op_map.get(op)
    if not sql_op:
        msg = f"Unsupported operator: {op}"
        raise ValueError(msg)
    return sql_op


def parse_filter(filter_query: str) -> tuple[str, list[str | int]]:
    """Parse `field = "value" && ...` filter syntax into a SQL WHERE clause and parameters."""
    if not filter_query:
        return "", []

    conditions = []
    params: list[str | int] = []

    for field, op, value in parse_conditions(filter_query):
        sql_op = _get_sql_operator(op)
        if sql_op == "LIKE":
            escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            conditions.append(f"{field} LIKE ? ESCAPE '\\'")
            params.append(f"%{escaped}%")
        else:
            conditions.append(f"{field} {sql_op} ?")
            params.append(_typed_value(field, value))

    return " AND ".join(conditions), params


def _parse_sort(sort: str) -> str:
    """Translate `-field` / `+field` / `field DESC` into a safe ORDER BY clause."""
    sort = sort.strip()
    match = re.match(r"^([+-]?)([A-Za-z_][A-Za-z0-9_]*)(?:\s+(ASC|DESC))?$", sort, re.IGNORECASE)
    if not match:
        logger.warning("Invalid sort parameter, using default", extra={"sort": sort})
        return "id ASC"

    prefix, field, direction = match.groups()
    if direction:
        order = direction.upper()
    else:
        order = "DESC" if prefix == "-" else "ASC"
    # id breaks ties between rows created within the same millisecond
    return f"{field} {order}, id {order}"


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = asyncio.Lock()


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop = asyncio.get_running_loop()
    loop_id = id(loop)
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA foreign_keys = ON")
        await conn.execute("PRAGMA journal_mode = WAL")

        _db_connections[cache_key] = conn

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key not in _db_connections:
        return

    try:
        async with _db_lock:
            conn = _db_connections.pop(cache_key, None)
            if conn is not None:
                await conn.close()
                logger.info(
                    "Closed SQLite connection",
                    extra={"thread_id": thread_id, "loop_id": loop_id, "db_path": str(path)},
                )
    except Exception as e:
        logger.warning(
            "Error closing SQLite connection",
            extra={"error": str(e), "thread_id": thread_id, "loop_id": loop_id},
        )


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from taskmind.core import schema

    await schema.init_db(db_path=db_path)


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it with its assigned id."""
    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        now = _now_iso()
        row = {"created": now, "updated": now, **data}
        columns = list(row.keys())
        columns_str = ", ".join(columns)
        placeholders_str = ", ".join("?" for _ in columns)
        values = [_encode_value(row[key]) for key in columns]

        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, values)
        await conn.commit()

        record_id = cursor.lastrowid
        result = await get_record(collection=collection, record_id=str(record_id))

        logger.info("Created record", extra={"collection": collection, "record_id": record_id})
        return result
    except Exception as e:
        if isinstance(e, aiosqlite.OperationalError) and "no such table" in str(e):
            msg = f"Table '{collection}' does not exist. Call init_db() first."
            logger.error("Table not found", extra={"collection": collection})
            raise DatabaseError(msg) from e
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single record by ID, raising RecordNotFoundError if not found."""
    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (int(record_id),))
        row = await cursor.fetchone()

        if row is None:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)

        columns = [description[0] for description in cursor.description]
        record = dict(zip(columns, row, strict=True))

        logger.debug("Retrieved record", extra={"collection": collection, "record_id": record_id})
        return _decode_record(record)
    except RecordNotFoundError:
        raise
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Update a record by ID and return the updated record."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        row = {**data, "updated": _now_iso()}
        set_clause = ", ".join(f"{key} = ?" for key in row)
        values = [_encode_value(val) for val in row.values()]
        values.append(int(record_id))

        query = f"UPDATE {collection} SET {set_clause} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, values)
        await conn.commit()

        if cursor.rowcount == 0:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)

        logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
        return await get_record(collection=collection, record_id=record_id)
    except RecordNotFoundError:
        raise
    except Exception as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to update record in {collection}: {e}"
        raise DatabaseError(msg) from e


async def update_records(*, collection: str, record_ids: list[str], data: dict[str, Any]) -> int:
    """Apply the same update to every record in record_ids and return the number of rows changed."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)
    if not record_ids:
        return 0

    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        row = {**data, "updated": _now_iso()}
        set_clause = ", ".join(f"{key} = ?" for key in row)
        id_placeholders = ", ".join("?" for _ in record_ids)
        values = [_encode_value(val) for val in row.values()]
        values.extend(int(record_id) for record_id in record_ids)

        query = f"UPDATE {collection} SET {set_clause} WHERE id IN ({id_placeholders})"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, values)
        await conn.commit()

        logger.info("Updated records", extra={"collection": collection, "count": cursor.rowcount})
        return cursor.rowcount
    except Exception as e:
        logger.error("update_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to update records in {collection}: {e}"
        raise DatabaseError(msg) from e


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if not found."""
    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (int(record_id),))
        await conn.commit()

        if cursor.rowcount == 0:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)

        logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})
    except RecordNotFoundError:
        raise
    except Exception as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e


async def list_records(
    *,
    collection: str,
    page: int = 1,
    per_page: int = 50,
    filter_query: str = "",
    sort: str = "",
) -> list[dict[str, Any]]:
    """List records with optional filtering, sorting, and pagination."""
    try:
        _validate_collection_name(collection)
        conn = await get_connection()

        where_clause = ""
        params: list[Any] = []
        if filter_query:
            where_clause, params = parse_filter(filter_query)
            where_clause = f"WHERE {where_clause}"

        order_by = _parse_sort(sort) if sort else "id ASC"
        offset = (page - 1) * per_page

        query = f"SELECT * FROM {collection} {where_clause} ORDER BY {order_by} LIMIT ? OFFSET ?"  # noqa: S608 - collection is validated
        params.extend([per_page, offset])

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        columns = [description[0] for description in cursor.description]
        records = [_decode_record(dict(zip(columns, row, strict=True))) for row in rows]

        logger.debug("Listed records", extra={"collection": collection, "count": len(records)})
        return records
    except Exception as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e


async def get_first_record(*, collection: str, filter_query: str) -> dict[str, Any] | None:
    """Return the first record matching the filter, or None."""
    records = await list_records(collection=collection, filter_query=filter_query, per_page=1)
    return records[0] if records else None


async def list_all_records(*, collection: str, filter_query: str = "", sort: str = "") -> list[dict[str, Any]]:
    """List every record matching the filter, one DEFAULT_PER_PAGE_LIMIT page at a time."""
    records: list[dict[str, Any]] = []
    page = 1
    while True:
        batch = await list_records(
            collection=collection,
            page=page,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=filter_query,
            sort=sort,
        )
        records.extend(batch)
        if len(batch) < constants.DEFAULT_PER_PAGE_LIMIT:
            return records
        page += 1

"""Pure Python in-memory database for unit testing."""

import asyncio
import copy
from datetime import UTC, datetime
from typing import Any

from taskmind.core.db_client import DatabaseError, RecordNotFoundError, parse_conditions


class InMemoryDBClient:
    """Pure Python in-memory database for unit testing.

    Mirrors the taskmind.core.db_client function signatures so it can be
    monkeypatched in their place. Supports basic CRUD operations, batch
    updates, and simple filtering/sorting.
    """

    def __init__(self):
        """Initialize empty in-memory database."""
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_counter = 1000
        self.fail_on: dict[tuple[str, str], Exception] = {}

    def _maybe_fail(self, operation: str, collection: str) -> None:
        """Raise the exception registered for (operation, collection), if any."""
        error = self.fail_on.get((operation, collection))
        if error is not None:
            raise error

    async def create_record(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new record in the specified collection.

        Raises:
            DatabaseError: If data is not a dictionary
        """
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")
        self._maybe_fail("create", collection)

        collection_records = self._collections.setdefault(collection, {})

        record_id = str(self._id_counter)
        self._id_counter += 1

        now = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        record = {"id": record_id, "created": now, "updated": now, **copy.deepcopy(data)}
        collection_records[record_id] = record

        return copy.deepcopy(record)

    async def get_record(self, collection: str, record_id: str) -> dict[str, Any]:
        """Get a record by ID from the specified collection.

        Raises:
            RecordNotFoundError: If record not found
            DatabaseError: If record_id is not a string
        """
        if not isinstance(record_id, str):
            raise DatabaseError(f"Record ID must be a string, got {type(record_id)}")
        self._maybe_fail("get", collection)

        if record_id not in self._collections.get(collection, {}):
            raise RecordNotFoundError(f"Record not found in {collection}: {record_id}")

        return copy.deepcopy(self._collections[collection][record_id])

    async def update_record(self, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Update an existing record.

        Raises:
            RecordNotFoundError: If record not found
            DatabaseError: For invalid arguments
        """
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")
        if not isinstance(record_id, str):
            raise DatabaseError(f"Record ID must be a string, got {type(record_id)}")
        self._maybe_fail("update", collection)

        if record_id not in self._collections.get(collection, {}):
            raise RecordNotFoundError(f"Record not found in {collection}: {record_id}")

        # Small delay so the updated timestamp differs from created
        await asyncio.sleep(0.001)
        record = self._collections[collection][record_id]
        record.update(copy.deepcopy(data))
        record["updated"] = datetime.now(UTC).isoformat().replace("+00:00", "Z")

        return copy.deepcopy(record)

    async def update_records(self, collection: str, record_ids: list[str], data: dict[str, Any]) -> int:
        """Apply the same update to several records and return how many exist."""
        self._maybe_fail("update_many", collection)

        updated = 0
        for record_id in record_ids:
            if record_id in self._collections.get(collection, {}):
                await self.update_record(collection, record_id, data)
                updated += 1
        return updated

    async def delete_record(self, collection: str, record_id: str) -> None:
        """Delete a record from the collection.

        Raises:
            RecordNotFoundError: If record not found
        """
        if not isinstance(record_id, str):
            raise DatabaseError(f"Record ID must be a string, got {type(record_id)}")
        self._maybe_fail("delete", collection)

        if record_id not in self._collections.get(collection, {}):
            raise RecordNotFoundError(f"Record not found in {collection}: {record_id}")

        del self._collections[collection][record_id]

    async def list_records(
        self,
        collection: str,
        page: int = 1,
        per_page: int = 50,
        filter_query: str = "",
        sort: str = "",
    ) -> list[dict[str, Any]]:
        """List records from the collection with optional filtering and sorting.

        Raises:
            DatabaseError: For invalid filter syntax
        """
        self._maybe_fail("list", collection)

        records = list(self._collections.get(collection, {}).values())

        if filter_query:
            records = [r for r in records if self._parse_filter(filter_query, r)]

        if sort:
            records = self._apply_sort(records, sort)

        start_idx = (page - 1) * per_page
        end_idx = start_idx + per_page

        # Deep copies prevent tests from mutating stored state
        return [copy.deepcopy(r) for r in records[start_idx:end_idx]]

    async def get_first_record(self, collection: str, filter_query: str) -> dict[str, Any] | None:
        """Get the first matching record or None."""
        records = await self.list_records(collection, filter_query=filter_query)
        return records[0] if records else None

    def _parse_filter(self, filter_str: str, record: dict[str, Any]) -> bool:
        """Evaluate filter expression against a record.

        Uses the same tokenizer as the SQLite client, so quoted values are
        unescaped and `&&` inside a value does not split it. Supports:
        - field = "value" (exact text match, "true"/"false" compared as booleans on bool fields)
        - field != "value" (not equal)
        - field ~ "value" (case-insensitive substring)
        """
        try:
            conditions = parse_conditions(filter_str)
        except ValueError as e:
            raise DatabaseError(str(e)) from e

        return all(self._matches(record, field, op, value) for field, op, value in conditions)

    def _matches(self, record: dict[str, Any], field: str, op: str, value: str) -> bool:
        actual = record.get(field)
        if actual is None:
            # SQL comparisons against NULL never match
            return False

        if isinstance(actual, bool):
            equal = actual == (value.lower() == "true")
        else:
            equal = str(actual) == value

        if op == "=":
            return equal
        if op == "!=":
            return not equal
        if op == "~":
            return value.lower() in str(actual).lower()
        raise DatabaseError(f"Unsupported operator in in-memory filter: {op}")

    def _apply_sort(self, records: list[dict], sort: str) -> list[dict]:
        """Sort records by field (prefix with - for descending); id breaks ties."""
        reverse = sort.startswith("-")
        field = sort.lstrip("+-")

        return sorted(
            records,
            key=lambda r: (r.get(field) or "", int(r["id"])),
            reverse=reverse,
        )

"""Helpers that build and merge INSERT statements for the bronze tables."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class BronzeBatch(Protocol):
    """A record that can be written as one row of a multi-row INSERT."""

    @classmethod
    def insert_header(cls) -> str:
        """The ``INSERT INTO ... VALUES`` prefix shared by every row."""
        ...

    def to_insert_value(self) -> str:
        """The parenthesised value tuple of this record."""
        ...


def create_insert_batch_request(batch: Iterable[BronzeBatch]) -> str:
    """Build a single INSERT for all records, or an empty string if there are none."""
    records = list(batch)
    if not records:
        return ""
    values = ",".join(record.to_insert_value() for record in records)
    return f"{type(records[0]).insert_header()} {values};"


def concat_requests(requests: Iterable[str], batch_size: int) -> list[str]:
    """Merge INSERT statements by target, dropping duplicate rows.

    Value tuples are grouped by everything between ``INSERT`` and ``VALUES``,
    sorted, deduplicated and re-emitted in statements of at most
    ``batch_size`` tuples each.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    values_by_table: dict[str, set[str]] = {}
    for request in requests:
        for statement in request.split("INSERT"):
            if not statement.strip():
                continue
            prefix, separator, value = statement.partition("VALUES")
            if not separator:
                continue
            values_by_table.setdefault(prefix.strip(), set()).add(value.strip()[:-1])

    merged: list[str] = []
    for table, values in values_by_table.items():
        ordered = sorted(values)
        for start in range(0, len(ordered), batch_size):
            chunk = ",".join(ordered[start:start + batch_size])
            merged.append(f"INSERT {table} VALUES {chunk};")
    return merged
"""
sql.py — Helpers for Building Parameterized SQL

Purpose:
- Turn a sparse "partial update" payload into the SET clause of an UPDATE,
  with every value bound as a parameter (never interpolated).

Usage:
    from app.utils.sql import sql_for_partial_update

    result = sql_for_partial_update(
        {"firstName": "Aliya", "age": 32},
        {"firstName": "first_name"},
    )
    update = result.unwrap()
    update.set_cols   # '"first_name"=:p1, "age"=:p2'
    update.values     # ['Aliya', 32]
    update.params     # {'p1': 'Aliya', 'p2': 32}
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from app.core.errors import bad_request
from app.core.result import Err, Ok, Result

PLACEHOLDER_PREFIX = "p"


@dataclass(frozen=True)
class PartialUpdate:
    """
    A compiled SET clause.

    `values[i]` binds to placeholder `:p{i + 1}`.
    """
    set_cols: str
    values: List[Any]

    @property
    def params(self) -> Dict[str, Any]:
        return {placeholder(idx): value for idx, value in enumerate(self.values, start=1)}


def placeholder(index: int) -> str:
    """Bind parameter name for the 1-based position `index`."""
    return f"{PLACEHOLDER_PREFIX}{index}"


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None,
) -> Result[PartialUpdate]:
    """
    Compile `data_to_update` into a column-assignment fragment.

    Args:
        data_to_update: logical field name → new value. Only these fields are set.
        js_to_sql: logical field name → storage column, for fields whose column
            name differs (e.g. {"firstName": "first_name"}). Unmapped keys are
            used verbatim.

    Returns:
        Ok(PartialUpdate) with assignments in key order and 1-based, contiguous
        placeholders, or Err(BAD_REQUEST) if there is nothing to update.
    """
    keys = list(data_to_update.keys())
    if not keys:
        return Err(bad_request("No data"))

    js_to_sql = js_to_sql or {}
    cols = [
        f'"{js_to_sql.get(key, key)}"=:{placeholder(idx)}'
        for idx, key in enumerate(keys, start=1)
    ]
    return Ok(PartialUpdate(
        set_cols=", ".join(cols),
        values=[data_to_update[key] for key in keys],
    ))

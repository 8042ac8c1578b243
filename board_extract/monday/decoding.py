"""Column value decoding.

Every column value arrives as JSON text. Known column types are reduced to a
single field of the parsed object; anything else is kept as the parsed JSON.
A known type is left out of the record when its value is not an object or
its field is "falsy" by the rules monday.com exports were written against:
missing, null, false, 0 and "" are falsy, while empty lists and objects
count as present.
"""

import json
from collections.abc import Callable, Iterable
from typing import Any

from board_extract.monday.models import BoardItem, ColumnValue, FlatRecord


def is_present(value: Any) -> bool:
    """Truthiness where an empty list or object still counts as a value."""
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def _join_linked_ids(linked: list[dict]) -> str:
    return ";".join(
        "" if entry.get("linkedPulseId") is None else str(entry["linkedPulseId"])
        for entry in linked
    )


# Column type -> (field of the parsed object, transform applied when present)
DECODERS: dict[str, tuple[str, Callable[[Any], Any] | None]] = {
    "board_relation": ("linkedPulseIds", _join_linked_ids),
    "phone": ("phone", None),
    "email": ("email", None),
    "creation_log": ("created_at", None),
    "status": ("index", None),
}


def parse_value(raw: str | None) -> Any:
    """Parse a raw column value. A null value stays None.

    Raises:
        json.JSONDecodeError: if raw is not valid JSON
    """
    if raw is None:
        return None
    return json.loads(raw)


def decode_column_values(columns: Iterable[ColumnValue]) -> dict[str, Any]:
    """Decode an item's columns into {column title: value}.

    The returned mapping also has a "type" key set to the type of the last
    column processed. Items with no columns get no "type" key.
    """
    decoded: dict[str, Any] = {}

    for column in columns:
        parsed = parse_value(column.value)
        decoder = DECODERS.get(column.type)

        if decoder is None:
            decoded[column.column_title] = parsed
        elif isinstance(parsed, dict):
            field_name, transform = decoder
            value = parsed.get(field_name)
            # Gate on the raw field; a joined relation of "" is still emitted
            if is_present(value):
                decoded[column.column_title] = transform(value) if transform else value

        decoded["type"] = column.type

    return decoded


def flatten_item(item: BoardItem, group: str) -> FlatRecord:
    """Build the flat record for one item.

    Decoded columns are merged after the identity keys, so a column titled
    "id", "name" or "group" overrides them.
    """
    return {
        "id": item.id,
        "name": item.name,
        "group": group,
        **decode_column_values(item.column_values),
    }

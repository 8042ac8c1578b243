"""Recorded API responses for board extraction tests."""

import json
from pathlib import Path

FIXTURES_DIR = Path(__file__).parent


def load_fixture(name: str) -> dict:
    """Load a JSON fixture file."""
    path = FIXTURES_DIR / f"{name}.json"
    return json.loads(path.read_text())


def column(title: str, type_: str, value: str | None) -> dict:
    """A raw column_values entry as the API returns it."""
    return {"column": {"title": title}, "type": type_, "value": value}


def item(item_id: str, name: str, *columns: dict) -> dict:
    return {"id": item_id, "name": name, "column_values": list(columns)}


def board_response(*groups: tuple[str, list[dict], str | None], name: str = "Board") -> dict:
    """Root query response built from (title, items, cursor) tuples."""
    return {
        "data": {
            "boards": [
                {
                    "name": name,
                    "groups": [
                        {"title": title, "items_page": {"cursor": cursor, "items": items}}
                        for title, items, cursor in groups
                    ],
                }
            ]
        }
    }


def next_page_response(items: list[dict], cursor: str | None = None) -> dict:
    return {"data": {"next_items_page": {"cursor": cursor, "items": items}}}

"""Data models for board extraction."""

from dataclasses import dataclass, field
from typing import Any

# A flattened item: id, name, group, one key per decoded column, and "type".
# Keys depend on which columns an item carries, so records stay plain dicts.
FlatRecord = dict[str, Any]


@dataclass(frozen=True)
class ColumnValue:
    """One typed column value of an item, as sent by the API."""

    column_title: str
    type: str
    value: str | None  # JSON-encoded; the API sends null for never-set columns

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnValue":
        return cls(
            column_title=data["column"]["title"],
            type=data["type"],
            value=data["value"],
        )


@dataclass(frozen=True)
class BoardItem:
    """A single board entry."""

    id: str
    name: str
    column_values: list[ColumnValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "BoardItem":
        return cls(
            id=data["id"],
            name=data["name"],
            column_values=[ColumnValue.from_dict(c) for c in data["column_values"]],
        )


@dataclass(frozen=True)
class ItemsPage:
    """One page of items plus the cursor for the next page, if any."""

    cursor: str | None
    items: list[BoardItem] = field(default_factory=list)

    @property
    def has_more(self) -> bool:
        return bool(self.cursor)

    @classmethod
    def from_dict(cls, data: dict) -> "ItemsPage":
        return cls(
            cursor=data.get("cursor"),
            items=[BoardItem.from_dict(i) for i in data["items"]],
        )


@dataclass(frozen=True)
class Group:
    """A named partition of a board with its first page of items."""

    title: str
    items_page: ItemsPage

    @classmethod
    def from_dict(cls, data: dict) -> "Group":
        return cls(
            title=data["title"],
            items_page=ItemsPage.from_dict(data["items_page"]),
        )


@dataclass
class ExtractionResult:
    """Summary of an extraction run, for reporting."""

    board_id: str
    board_name: str | None = None
    records: list[FlatRecord] = field(default_factory=list)
    pages_fetched: int = 0

    def counts_by_group(self) -> dict[str, int]:
        """Record counts per group title, in first-seen order."""
        counts: dict[str, int] = {}
        for record in self.records:
            counts[record["group"]] = counts.get(record["group"], 0) + 1
        return counts

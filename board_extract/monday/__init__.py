"""monday.com board extraction.

Fetches every group and page of a board over GraphQL and flattens each
item's typed column values into a plain record.
"""

from board_extract.monday.client import MondayClient
from board_extract.monday.decoding import decode_column_values, flatten_item
from board_extract.monday.models import BoardItem, ColumnValue, FlatRecord, Group, ItemsPage
from board_extract.monday.traversal import BoardExtractor, BoardNotFoundError, GraphQLError

__all__ = [
    "BoardExtractor",
    "BoardItem",
    "BoardNotFoundError",
    "ColumnValue",
    "FlatRecord",
    "GraphQLError",
    "Group",
    "ItemsPage",
    "MondayClient",
    "decode_column_values",
    "flatten_item",
]

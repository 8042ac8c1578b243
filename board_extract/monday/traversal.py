"""Board traversal: fetch every group and page of a board and flatten items.

One root query returns all groups with their first page of items. Groups
whose page carries a cursor are continued with next_items_page until a page
comes back without one.
"""

import logging
from typing import Protocol

from board_extract.monday.decoding import flatten_item
from board_extract.monday.models import ExtractionResult, FlatRecord, Group, ItemsPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 25

ITEM_FIELDS = """
    id
    name
    column_values {
        column {
            title
        }
        type
        value
    }
"""

BOARD_QUERY = f"""
query($boardIds: [ID!], $limit: Int!) {{
    boards(ids: $boardIds) {{
        name
        groups {{
            title
            items_page(limit: $limit) {{
                cursor
                items {{{ITEM_FIELDS}}}
            }}
        }}
    }}
}}
"""

NEXT_PAGE_QUERY = f"""
query($cursor: String!, $limit: Int!) {{
    next_items_page(cursor: $cursor, limit: $limit) {{
        cursor
        items {{{ITEM_FIELDS}}}
    }}
}}
"""


class BoardNotFoundError(LookupError):
    """The root query returned no board for the requested id."""


class GraphQLError(RuntimeError):
    """The API answered with GraphQL errors instead of data."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__(f"GraphQL errors: {messages}")


class QueryExecutor(Protocol):
    def execute(self, query: str, variables: dict | None = None) -> dict: ...


class BoardExtractor:
    """Extracts all items of one board as flat records."""

    def __init__(
        self,
        executor: QueryExecutor,
        board_id: str,
        page_limit: int = DEFAULT_PAGE_LIMIT,
    ):
        self.executor = executor
        self.board_id = str(board_id)
        self.page_limit = page_limit

    def _run(self, query: str, variables: dict) -> dict:
        response = self.executor.execute(query, variables)
        if response.get("errors") and not response.get("data"):
            raise GraphQLError([e.get("message", str(e)) for e in response["errors"]])
        return response["data"]

    def fetch_groups(self) -> tuple[str | None, list[Group]]:
        """Run the root query and return (board name, groups).

        Raises:
            BoardNotFoundError: if no board matches the id
        """
        data = self._run(BOARD_QUERY, {"boardIds": [self.board_id], "limit": self.page_limit})
        boards = data["boards"]
        if not boards:
            raise BoardNotFoundError(f"No board found with id {self.board_id}")

        board = boards[0]
        return board.get("name"), [Group.from_dict(g) for g in board["groups"]]

    def fetch_next_page(self, cursor: str) -> ItemsPage:
        """Fetch the page that follows cursor."""
        data = self._run(NEXT_PAGE_QUERY, {"cursor": cursor, "limit": self.page_limit})
        return ItemsPage.from_dict(data["next_items_page"])

    def run(self) -> ExtractionResult:
        """Walk every group and page, returning records with run statistics."""
        board_name, groups = self.fetch_groups()
        result = ExtractionResult(board_id=self.board_id, board_name=board_name, pages_fetched=1)
        logger.info("Board %s (%s): %d groups", self.board_id, board_name, len(groups))

        for group in groups:
            page = group.items_page
            result.records.extend(self._flatten_page(page, group.title))

            while page.has_more:
                logger.debug("Group %r: following cursor %s", group.title, page.cursor)
                page = self.fetch_next_page(page.cursor)
                result.pages_fetched += 1
                result.records.extend(self._flatten_page(page, group.title))

            logger.info("Group %r done, %d records so far", group.title, len(result.records))

        return result

    def extract(self) -> list[FlatRecord]:
        """Return every item of the board as a flat record, grouped in source order."""
        return self.run().records

    @staticmethod
    def _flatten_page(page: ItemsPage, group_title: str) -> list[FlatRecord]:
        return [flatten_item(item, group_title) for item in page.items]

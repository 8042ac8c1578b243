"""GraphQL transport for the monday.com API."""

import logging

from board_extract.monday.api_logging import create_logging_client

logger = logging.getLogger(__name__)


class MondayClient:
    """Executes GraphQL queries against a board API endpoint.

    The API key is sent as the raw Authorization header value; monday.com
    does not expect a "Bearer" scheme.
    """

    def __init__(self, api_url: str, api_key: str, timeout: float = 30.0, **client_kwargs):
        """Initialize the client.

        Extra keyword arguments are passed to create_logging_client(), e.g.
        a transport for tests. Request/response capture is switched on with
        BOARD_EXTRACT_LOG_API (see api_logging).
        """
        self.api_url = api_url
        self._client = create_logging_client(
            headers={
                "Content-Type": "application/json",
                "Authorization": api_key,
            },
            timeout=timeout,
            **client_kwargs,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "MondayClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def execute(self, query: str, variables: dict | None = None) -> dict:
        """Execute a GraphQL query and return the decoded response body.

        The body is returned as-is, including any GraphQL "errors" entry.

        Raises:
            httpx.TransportError: on network failure
            httpx.HTTPStatusError: on a non-2xx status
            json.JSONDecodeError: if the body is not valid JSON
        """
        payload: dict = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        logger.debug("POST %s variables=%s", self.api_url, variables)
        resp = self._client.post(self.api_url, json=payload)
        resp.raise_for_status()
        return resp.json()

"""Notion REST API client."""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import CollectionClient, QueryPage
from .models import DatabaseResponse, ErrorResponse, PageResponse, QueryResponse
from ..errors import ConfigError, RemoteError
from ..models.migration import MigrationConfig
from ..models.record import PageRecord
from ..models.schema import DatabaseSchema

logger = logging.getLogger(__name__)

# A 5xx on page creation may arrive after the page was created, so only
# 429 (request not processed) is retried for writes.
READ_RETRY_STATUSES = [429, 500, 502, 503, 504]
WRITE_RETRY_STATUSES = [429]


class NotionClient(CollectionClient):
    """
    Client for the Notion databases and pages endpoints.

    Supports:
    - Cursor pagination over database queries
    - Database schema retrieval
    - Page creation inside a database
    - Retry with backoff on 429 and 5xx responses for reads
    - Retry on 429 only for page creation, which is not idempotent
    """

    def __init__(
        self,
        config: MigrationConfig,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            config: Migration configuration holding token and HTTP options
            session: Custom requests session (authentication is still applied)
        """
        if not config.notion_token and session is None:
            raise ConfigError("NOTION_API_KEY is required to talk to Notion")

        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.page_size = config.page_size
        self.timeout = config.timeout
        self._session = session or self._create_session(READ_RETRY_STATUSES)
        self._write_session = session or self._create_session(WRITE_RETRY_STATUSES)
        self._apply_headers(self._session)
        self._apply_headers(self._write_session)

    def _create_session(self, retry_statuses: List[int]) -> requests.Session:
        """Create a requests session that retries on the given statuses."""
        session = requests.Session()

        retries = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=retry_statuses,
            allowed_methods=["GET", "POST"],
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _apply_headers(self, session: requests.Session) -> None:
        if self.config.notion_token:
            session.headers["Authorization"] = f"Bearer {self.config.notion_token}"
        session.headers["Notion-Version"] = self.config.notion_version
        session.headers["Content-Type"] = "application/json"

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        session = session or self._session

        try:
            response = session.request(method, url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            raise self._error_from_response(e.response) from e

        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Request to {path} failed: {e}") from e

        except ValueError as e:
            raise RemoteError(f"Invalid JSON returned by {path}: {e}") from e

    def _error_from_response(self, response: requests.Response) -> RemoteError:
        """Build a RemoteError from an error response body."""
        message = f"HTTP error: {response.status_code}"
        code = None

        try:
            error = ErrorResponse.model_validate(response.json())
            message = error.message or message
            code = error.code
        except (ValueError, ValidationError):
            if response.text:
                message = f"{message} - {response.text}"

        return RemoteError(message, status_code=response.status_code, code=code)

    def fetch_page(
        self,
        collection_id: str,
        cursor: Optional[str] = None
    ) -> QueryPage:
        """Query one page of a database."""
        payload: Dict[str, Any] = {"page_size": self.page_size}
        if cursor:
            payload["start_cursor"] = cursor

        data = self._request("POST", f"/databases/{collection_id}/query", payload)

        try:
            response = QueryResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteError(f"Malformed query response for database {collection_id}: {e}") from e

        return QueryPage(
            records=[PageRecord.from_api(item) for item in response.results],
            has_more=response.has_more,
            next_cursor=response.next_cursor,
        )

    def fetch_schema(self, collection_id: str) -> DatabaseSchema:
        """Retrieve a database and its property schema."""
        data = self._request("GET", f"/databases/{collection_id}")

        try:
            response = DatabaseResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteError(f"Malformed database response for {collection_id}: {e}") from e

        return DatabaseSchema.from_api(response.model_dump())

    def create_record(
        self,
        collection_id: str,
        properties: Dict[str, Dict[str, Any]]
    ) -> PageRecord:
        """Create a page inside a database."""
        payload = {
            "parent": {"database_id": collection_id},
            "properties": properties,
        }

        data = self._request("POST", "/pages", payload, session=self._write_session)

        try:
            response = PageResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteError(f"Malformed page response: {e}") from e

        return PageRecord.from_api(response.model_dump())

"""Base client interface for the remote database service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
import logging

from ..models.record import PageRecord
from ..models.schema import DatabaseSchema

logger = logging.getLogger(__name__)


@dataclass
class QueryPage:
    """One page of results from a database query."""
    records: List[PageRecord] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


class CollectionClient(ABC):
    """
    Base class for database clients.

    Clients own all network and authentication concerns. The migration
    engine only depends on the three operations below.
    """

    page_size: int = 100

    @abstractmethod
    def fetch_page(
        self,
        collection_id: str,
        cursor: Optional[str] = None
    ) -> QueryPage:
        """
        Fetch one page of records from a database.

        Args:
            collection_id: ID of the database to query
            cursor: Cursor returned by the previous page, or None for the first

        Returns:
            QueryPage with the records and pagination state
        """
        pass

    @abstractmethod
    def fetch_schema(self, collection_id: str) -> DatabaseSchema:
        """
        Fetch the property schema of a database.

        Args:
            collection_id: ID of the database

        Returns:
            DatabaseSchema of the database
        """
        pass

    @abstractmethod
    def create_record(
        self,
        collection_id: str,
        properties: Dict[str, Dict[str, Any]]
    ) -> PageRecord:
        """
        Create a page in a database.

        Args:
            collection_id: ID of the parent database
            properties: Property values keyed by property name

        Returns:
            The created PageRecord

        Raises:
            RemoteError: if the service rejects the request
        """
        pass

    def iter_pages(self, collection_id: str) -> Iterator[QueryPage]:
        """
        Iterate over every page of a database query.

        Yields:
            QueryPage objects until the service reports no more results
        """
        cursor = None

        while True:
            page = self.fetch_page(collection_id, cursor)
            yield page

            if not page.has_more or not page.next_cursor:
                break
            cursor = page.next_cursor

    def fetch_all(self, collection_id: str) -> List[PageRecord]:
        """Fetch every record of a database into a single list."""
        records: List[PageRecord] = []

        for page_number, page in enumerate(self.iter_pages(collection_id), 1):
            records.extend(page.records)
            logger.info(f"Loaded {len(records)} pages ({page_number} requests)...")

        return records

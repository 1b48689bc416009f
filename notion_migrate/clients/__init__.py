"""Clients for the remote database service."""

from .base import CollectionClient, QueryPage
from .notion_client import NotionClient

__all__ = [
    "CollectionClient",
    "QueryPage",
    "NotionClient",
]

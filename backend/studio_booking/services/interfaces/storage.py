"""
Document store interface.

Paths are slash-separated Firestore-style paths, alternating collection and
document ids, e.g. ``artifacts/app/users/u1/bookings/b1``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class StoredDocument:
    """A document returned from a query, with its full path."""

    id: str
    path: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def owner_id(self) -> str:
        """Id of the document that owns this document's collection."""
        return self.path.split("/")[-3]


class DocumentStore(ABC):
    """
    Interface for the booking document store.

    Implementations:
    - FirestoreDocumentStore: Cloud Firestore through firebase-admin
    """

    @abstractmethod
    def server_timestamp(self) -> Any:
        """Value that the store replaces with its own write time."""

    @abstractmethod
    async def get_document(self, path: str) -> Optional[dict[str, Any]]:
        """Return the document data, or None if it does not exist."""

    @abstractmethod
    async def set_document(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        """Create or overwrite a document; merge keeps unmentioned fields."""

    @abstractmethod
    async def update_document(self, path: str, data: dict[str, Any]) -> None:
        """
        Update fields of an existing document.

        Raises:
            DocumentNotFound: the document does not exist
        """

    @abstractmethod
    async def delete_document(self, path: str) -> None:
        pass

    @abstractmethod
    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""

    @abstractmethod
    async def query_collection_group(
        self,
        collection_id: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        """Return every document in every collection named ``collection_id``."""

    @abstractmethod
    async def increment(self, path: str, field_name: str, amount: int) -> None:
        """Atomically add ``amount`` to a numeric field, creating it if needed."""

    @abstractmethod
    async def decrement_if_at_least(self, path: str, field_name: str, amount: int = 1) -> bool:
        """
        Atomically subtract ``amount`` from a numeric field.

        The write only happens when the current value is at least ``amount``;
        a missing document or field counts as zero.

        Returns:
            True if the value was decremented, False if it was too low
        """


class DocumentNotFound(Exception):
    def __init__(self, path: str):
        super().__init__(f"No document at {path}")
        self.path = path

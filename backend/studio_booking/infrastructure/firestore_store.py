"""
Cloud Firestore implementation of the DocumentStore interface.

Uses the async Firestore client that firebase-admin exposes. The conditional
credit decrement runs in a Firestore transaction, which retries on
contention, so two concurrent charges cannot both spend the last credit.
"""

from typing import Any, Optional

import firebase_admin
from firebase_admin import firestore_async
from google.api_core import exceptions as gexc
from google.cloud import firestore

from studio_booking.core.exceptions import StorageError
from studio_booking.core.logging import get_logger
from studio_booking.services.interfaces.storage import DocumentNotFound, DocumentStore, StoredDocument

logger = get_logger(__name__)


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.client = firestore_async.client(app)

    def server_timestamp(self) -> Any:
        return firestore.SERVER_TIMESTAMP

    async def get_document(self, path: str) -> Optional[dict[str, Any]]:
        try:
            snapshot = await self.client.document(path).get()
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("get", path, e) from e
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def set_document(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        try:
            await self.client.document(path).set(data, merge=merge)
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("set", path, e) from e

    async def update_document(self, path: str, data: dict[str, Any]) -> None:
        try:
            await self.client.document(path).update(data)
        except gexc.NotFound as e:
            raise DocumentNotFound(path) from e
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("update", path, e) from e

    async def delete_document(self, path: str) -> None:
        try:
            await self.client.document(path).delete()
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("delete", path, e) from e

    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        try:
            _, ref = await self.client.collection(collection_path).add(data)
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("add", collection_path, e) from e
        return ref.id

    async def query_collection_group(
        self,
        collection_id: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        query = self.client.collection_group(collection_id)
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)

        try:
            return [
                StoredDocument(id=snapshot.id, path=snapshot.reference.path, data=snapshot.to_dict() or {})
                async for snapshot in query.stream()
            ]
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("query", collection_id, e) from e

    async def increment(self, path: str, field_name: str, amount: int) -> None:
        try:
            await self.client.document(path).set({field_name: firestore.Increment(amount)}, merge=True)
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("increment", path, e) from e

    async def decrement_if_at_least(self, path: str, field_name: str, amount: int = 1) -> bool:
        ref = self.client.document(path)

        @firestore.async_transactional
        async def _decrement(transaction) -> bool:
            snapshot = await ref.get(transaction=transaction)
            current = (snapshot.to_dict() or {}).get(field_name, 0) if snapshot.exists else 0
            if current < amount:
                return False
            transaction.update(ref, {field_name: current - amount})
            return True

        try:
            return await _decrement(self.client.transaction())
        except gexc.GoogleAPICallError as e:
            raise self._storage_error("decrement", path, e) from e

    @staticmethod
    def _storage_error(operation: str, path: str, error: Exception) -> StorageError:
        logger.error("firestore_operation_failed", operation=operation, path=path, error=str(error))
        return StorageError("Document store request failed.", details=str(error))

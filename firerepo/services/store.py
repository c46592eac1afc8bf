"""
CRUD façade over Firestore collections.
"""
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar

from google.api_core import exceptions
from google.api_core.gapic_v1.client_info import ClientInfo
from google.cloud import firestore

from firerepo import codec
from firerepo.config import Config
from firerepo.errors import (
    DataNotFoundError,
    DecodeError,
    InvalidArgumentError,
    LimitExceededError,
    TransportError,
)
from firerepo.logger import get_logger
from firerepo.models import Identifiable

logger = get_logger()

T = TypeVar('T')

# Failures reported by the Firestore client (network, quota, deadline, internal)
TRANSPORT_ERRORS = (exceptions.GoogleAPICallError, exceptions.RetryError)


def get_client(project_id: Optional[str] = None) -> firestore.Client:
    """
    Create a Firestore client tagged with the package user agent.

    Args:
        project_id: Google Cloud project, defaults to Config.PROJECT_ID
    """
    return firestore.Client(
        project=project_id or Config.PROJECT_ID,
        client_info=ClientInfo(user_agent=Config.USER_AGENT),
    )


class RecordStore:
    """
    Get/Save/Update/Delete of single documents plus atomic batch saves.

    Every collection is resolved under root_path when one is configured,
    so several deployments can share one Firestore database.
    """

    def __init__(self, client: firestore.Client, root_path: Optional[str] = None):
        """
        Args:
            client: Firestore client (or any object exposing the same API)
            root_path: Parent document path, defaults to Config.DB_ROOT_PATH
        """
        if client is None:
            raise InvalidArgumentError("nil client")
        self.client = client
        self.root_path = Config.DB_ROOT_PATH if root_path is None else root_path

    def get_collection(self, name: str):
        """
        Get the Firestore collection reference, nested under the root path.

        A root path with an even number of segments is used as a document
        path ("workspaces/demo"); an odd one gets a "root" document
        appended ("workspaces" -> "workspaces/root").
        """
        if not name:
            raise InvalidArgumentError("collection name required")

        parts = [p for p in (self.root_path or '').split('/') if p]
        if not parts:
            return self.client.collection(name)

        if len(parts) % 2:
            parts.append('root')

        parent = self.client.collection(parts[0]).document(parts[1])
        for i in range(2, len(parts), 2):
            parent = parent.collection(parts[i]).document(parts[i + 1])
        return parent.collection(name)

    @staticmethod
    def resolve_timeout(timeout: Optional[float]) -> Optional[float]:
        return Config.REQUEST_TIMEOUT if timeout is None else timeout

    @staticmethod
    def transport_error(e: Exception, action: str, collection: str, doc_id: Optional[str] = None) -> TransportError:
        target = f"{collection} record with id {doc_id}" if doc_id else f"{collection} records"
        logger.error(f"Error {action} {target}: {e}", exc_info=True)
        return TransportError(f"error {action} {target}: {e}", collection=collection, doc_id=doc_id)

    def save(self, collection: str, doc_id: str, value: Any, timeout: Optional[float] = None) -> None:
        """
        Write value at doc_id, replacing any existing document.

        Args:
            collection: Collection name
            doc_id: Document ID
            value: Record model or mapping to store

        Raises:
            InvalidArgumentError: If collection, doc_id or value is empty, or value
                holds a field Firestore cannot store
            TransportError: If the write fails
        """
        if value is None:
            raise InvalidArgumentError("nil value to save")
        if not doc_id:
            raise InvalidArgumentError("id required")

        col = self.get_collection(collection)
        data = codec.encode(value)
        if not data:
            raise InvalidArgumentError(f"empty value to save in {collection} with id {doc_id}")

        logger.debug(f"Saving {collection}/{doc_id}")
        try:
            col.document(doc_id).set(data, timeout=self.resolve_timeout(timeout))
        except TRANSPORT_ERRORS as e:
            raise self.transport_error(e, "saving", collection, doc_id) from e

    def get(self, collection: str, doc_id: str, item_type: Type[T] = dict, timeout: Optional[float] = None) -> T:
        """
        Read the document at doc_id and decode it into item_type.

        Args:
            collection: Collection name
            doc_id: Document ID
            item_type: Record model to decode into, dict returns the raw map

        Returns:
            A new item_type instance

        Raises:
            InvalidArgumentError: If doc_id or collection is empty
            DataNotFoundError: If no document exists at doc_id
            DecodeError: If the document cannot be converted into item_type
            TransportError: If the read fails
        """
        if not doc_id:
            raise InvalidArgumentError("id required")
        if item_type is not dict and not codec.is_record_type(item_type):
            raise InvalidArgumentError(f"cannot decode records into {item_type!r}")

        col = self.get_collection(collection)

        try:
            snapshot = col.document(doc_id).get(timeout=self.resolve_timeout(timeout))
        except exceptions.NotFound:
            raise DataNotFoundError(collection, doc_id) from None
        except TRANSPORT_ERRORS as e:
            raise self.transport_error(e, "getting", collection, doc_id) from e

        if snapshot is None or not snapshot.exists:
            raise DataNotFoundError(collection, doc_id)

        data = snapshot.to_dict()
        if data is None:
            raise DecodeError(f"record with id {doc_id} found in {collection} collection but has no data")

        if item_type is dict:
            return dict(data)

        try:
            return codec.decode_into(data, codec.zero_value(item_type))
        except DecodeError as e:
            raise DecodeError(f"data in {collection} for id {doc_id} is in an incorrect format: {e}") from e

    def update(self, collection: str, doc_id: str, patch: Optional[Mapping[str, Any]], timeout: Optional[float] = None) -> None:
        """
        Merge the given field paths into an existing document.

        Only the named fields change. Dotted paths ("address.city") address
        nested map fields. An empty or None patch is a no-op.

        Raises:
            InvalidArgumentError: If collection or doc_id is empty, or a new value
                cannot be stored
            DataNotFoundError: If no document exists at doc_id
            TransportError: If the write fails
        """
        if not collection or not doc_id:
            raise InvalidArgumentError("nil collection or id in update")

        col = self.get_collection(collection)

        if not patch:
            logger.debug(f"Empty update for {collection}/{doc_id}, nothing to do")
            return

        changes = codec.to_firestore(dict(patch))

        logger.debug(f"Updating {collection}/{doc_id} fields {sorted(changes)}")
        try:
            col.document(doc_id).update(changes, timeout=self.resolve_timeout(timeout))
        except exceptions.NotFound:
            raise DataNotFoundError(collection, doc_id) from None
        except TRANSPORT_ERRORS as e:
            raise self.transport_error(e, "updating", collection, doc_id) from e

    def delete(self, collection: str, doc_id: str, timeout: Optional[float] = None) -> None:
        """
        Delete the document at doc_id. Deleting a missing document succeeds.

        Raises:
            InvalidArgumentError: If collection or doc_id is empty
            TransportError: If the delete fails
        """
        if not doc_id:
            raise InvalidArgumentError("nil id")

        col = self.get_collection(collection)

        logger.debug(f"Deleting {collection}/{doc_id}")
        try:
            col.document(doc_id).delete(timeout=self.resolve_timeout(timeout))
        except exceptions.NotFound:
            logger.debug(f"{collection}/{doc_id} already absent")
        except TRANSPORT_ERRORS as e:
            raise self.transport_error(e, "deleting", collection, doc_id) from e

    def batch_save(self, collection: str, items: Sequence[Identifiable], timeout: Optional[float] = None) -> None:
        """
        Write every item keyed by its own id in one atomic batch.

        Raises:
            InvalidArgumentError: If collection is empty, an item has no id or
                holds a field Firestore cannot store
            LimitExceededError: If there are more than Config.MAX_BATCH_SIZE items
            TransportError: If the commit fails (nothing is written)
        """
        if not collection:
            raise InvalidArgumentError("nil collection name")

        batch_size = len(items or ())
        if batch_size == 0:
            return

        if batch_size > Config.MAX_BATCH_SIZE:
            raise LimitExceededError(f"batch size {batch_size} exceeds max batch size {Config.MAX_BATCH_SIZE}")

        col = self.get_collection(collection)

        writes = []
        for item in items:
            if not isinstance(item, Identifiable):
                raise InvalidArgumentError(f"{type(item).__name__} does not implement get_id()")
            doc_id = item.get_id()
            if not doc_id:
                raise InvalidArgumentError(f"{type(item).__name__} has an empty id")
            writes.append((col.document(doc_id), codec.encode(item)))

        batch = self.client.batch()
        for ref, data in writes:
            batch.set(ref, data)

        logger.debug(f"Committing batch of {batch_size} records to {collection}")
        try:
            batch.commit(timeout=self.resolve_timeout(timeout))
        except TRANSPORT_ERRORS as e:
            raise self.transport_error(e, f"batch setting {batch_size}", collection) from e

"""
Data-access facade over document collections

Every operation performs a single round trip against the collection's
store and turns any StoreError into a FacadeError whose message names the
operation and the identifiers involved. The original error is chained.
"""

import logging
from typing import Any, Dict, List, Optional

from database.documents import CollectionRef, DocumentNotFound, DocumentSnapshot, StoreError

logger = logging.getLogger(__name__)

# Highest code point; sorts after any realistic user input
PREFIX_SENTINEL = "\U0010ffff"


class FacadeError(Exception):
    """Data-access failure carrying a human-readable message"""

    def __init__(self, message: str, operation: str):
        self.message = message
        self.operation = operation
        super().__init__(message)


class NotFoundError(FacadeError):
    """The targeted document does not exist"""

    def __init__(self, message: str, operation: str, doc_id: str):
        self.doc_id = doc_id
        super().__init__(message, operation)


async def add(collection: CollectionRef, fields: Dict[str, Any]) -> str:
    """Create a new document and return its id. Not idempotent."""
    try:
        doc_id = await collection.add(fields)
    except StoreError as e:
        logger.error(f"Add failed on {collection.name}: {e}")
        raise FacadeError(f"Failed to add item: {e}", "add") from e
    logger.info(f"Added document {doc_id} to {collection.name}")
    return doc_id


async def delete_by_id(collection: CollectionRef, doc_id: str) -> None:
    """Delete a document. Deleting a missing id is a no-op."""
    try:
        await collection.delete(doc_id)
    except StoreError as e:
        logger.error(f"Delete failed on {collection.name}/{doc_id}: {e}")
        raise FacadeError(f"Failed to delete item with ID {doc_id}: {e}", "delete_by_id") from e
    logger.info(f"Deleted document {doc_id} from {collection.name}")


async def select_all(collection: CollectionRef, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
    """
    Read every document of a collection

    Args:
        collection: Collection handle
        order_by: Field to sort ascending by; store order when None

    Returns:
        List of snapshots
    """
    try:
        return await collection.get_all(order_by)
    except StoreError as e:
        logger.error(f"Select all failed on {collection.name}: {e}")
        raise FacadeError(f"Failed to retrieve all items: {e}", "select_all") from e


async def select_by_id(collection: CollectionRef, doc_id: str) -> DocumentSnapshot:
    """Read one document. A missing id yields a snapshot with exists=False."""
    try:
        return await collection.get_by_id(doc_id)
    except StoreError as e:
        logger.error(f"Select by id failed on {collection.name}/{doc_id}: {e}")
        raise FacadeError(f"Failed to retrieve item with ID {doc_id}: {e}", "select_by_id") from e


async def select_where(collection: CollectionRef, field: str, operator: str, value: Any) -> List[DocumentSnapshot]:
    """
    Read the documents whose field satisfies `field <operator> value`

    Args:
        collection: Collection handle
        field: Field to filter on
        operator: One of ==, !=, <, <=, >, >=, in, not-in, array-contains
        value: Value to compare with

    Returns:
        List of matching snapshots
    """
    try:
        return await collection.get_where(field, operator, value)
    except StoreError as e:
        logger.error(f"Select where failed on {collection.name}: {field} {operator} {value!r}: {e}")
        raise FacadeError(
            f"Failed to retrieve items where {field} {operator} {value}: {e}", "select_where"
        ) from e


async def select_like(collection: CollectionRef, field: str, prefix: str) -> List[DocumentSnapshot]:
    """
    Read the documents whose string field starts with prefix

    Emulates `LIKE 'prefix%'` with an ordered range scan over
    [prefix, prefix + PREFIX_SENTINEL).
    """
    try:
        return await collection.get_range(field, prefix, prefix + PREFIX_SENTINEL)
    except StoreError as e:
        logger.error(f"Select like failed on {collection.name}: {field} starts with {prefix!r}: {e}")
        raise FacadeError(f"Failed to retrieve items like {prefix}: {e}", "select_like") from e


async def update_by_id(collection: CollectionRef, doc_id: str, fields: Dict[str, Any]) -> None:
    """Merge fields into an existing document. Unlisted fields keep their values."""
    try:
        await collection.update(doc_id, fields)
    except DocumentNotFound as e:
        logger.warning(f"Update target missing on {collection.name}/{doc_id}")
        raise NotFoundError(f"Failed to update item with ID {doc_id}: {e}", "update_by_id", doc_id) from e
    except StoreError as e:
        logger.error(f"Update failed on {collection.name}/{doc_id}: {e}")
        raise FacadeError(f"Failed to update item with ID {doc_id}: {e}", "update_by_id") from e
    logger.info(f"Updated document {doc_id} in {collection.name}")

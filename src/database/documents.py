"""
Document store boundary

A document store holds named collections of JSON documents keyed by an
opaque, store-assigned id. Concrete backends implement the seven
capabilities below; everything above this module talks to a CollectionRef.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Comparison operators accepted by get_where
EQUALITY_OPERATORS = ("==", "!=")
ORDERING_OPERATORS = ("<", "<=", ">", ">=")
MEMBERSHIP_OPERATORS = ("in", "not-in", "array-contains")
WHERE_OPERATORS = EQUALITY_OPERATORS + ORDERING_OPERATORS + MEMBERSHIP_OPERATORS


class StoreError(Exception):
    """Raised by a document store backend when a round trip fails"""


class DocumentNotFound(StoreError):
    """Raised when a write targets a document that does not exist"""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"No document with id {doc_id} in collection {collection}")


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time read of one document"""
    id: str
    exists: bool
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, field_name: str, default: Any = None) -> Any:
        return self.data.get(field_name, default)

    @classmethod
    def missing(cls, doc_id: str) -> "DocumentSnapshot":
        return cls(id=doc_id, exists=False, data={})


def validate_operator(op: str) -> None:
    """Reject operators the backends cannot evaluate"""
    if op not in WHERE_OPERATORS:
        raise StoreError(f"Unsupported where operator: {op}. Supported: {', '.join(WHERE_OPERATORS)}")


def validate_field_name(field_name: str) -> None:
    if not isinstance(field_name, str) or not field_name:
        raise StoreError("Field name must be a non-empty string")


class DocumentStore(ABC):
    """Client for a document store. Constructed once at startup and closed on shutdown."""

    def collection(self, name: str) -> "CollectionRef":
        if not name:
            raise ValueError("Collection name is required")
        return CollectionRef(self, name)

    @abstractmethod
    async def ping(self) -> None:
        """Round trip to check the store is reachable"""

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the client"""

    @abstractmethod
    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    async def get_by_id(self, collection: str, doc_id: str) -> DocumentSnapshot:
        ...

    @abstractmethod
    async def get_all(self, collection: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        ...

    @abstractmethod
    async def get_where(self, collection: str, field_name: str, op: str, value: Any) -> List[DocumentSnapshot]:
        ...

    @abstractmethod
    async def get_range(self, collection: str, field_name: str, lower: str, upper: str) -> List[DocumentSnapshot]:
        """Documents whose string field value lies in [lower, upper), ascending by code point"""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        ...


class CollectionRef:
    """Handle on one named collection of a DocumentStore"""

    def __init__(self, store: DocumentStore, name: str):
        self.store = store
        self.name = name

    def __repr__(self) -> str:
        return f"CollectionRef({self.name!r})"

    async def add(self, fields: Dict[str, Any]) -> str:
        return await self.store.add(self.name, fields)

    async def get_by_id(self, doc_id: str) -> DocumentSnapshot:
        return await self.store.get_by_id(self.name, doc_id)

    async def get_all(self, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        return await self.store.get_all(self.name, order_by)

    async def get_where(self, field_name: str, op: str, value: Any) -> List[DocumentSnapshot]:
        validate_field_name(field_name)
        validate_operator(op)
        return await self.store.get_where(self.name, field_name, op, value)

    async def get_range(self, field_name: str, lower: str, upper: str) -> List[DocumentSnapshot]:
        validate_field_name(field_name)
        return await self.store.get_range(self.name, field_name, lower, upper)

    async def delete(self, doc_id: str) -> None:
        await self.store.delete(self.name, doc_id)

    async def update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        await self.store.update(self.name, doc_id, fields)

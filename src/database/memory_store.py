"""
In-process document store for local development and tests
"""

import asyncio
import copy
import logging
import uuid
from typing import Any, Dict, List, Optional

from database.documents import DocumentNotFound, DocumentSnapshot, DocumentStore, StoreError

logger = logging.getLogger(__name__)

_MISSING = object()


def _same_json_type(left: Any, right: Any) -> bool:
    # bool is an int subclass; JSON keeps them apart
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool)
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return True
    return type(left) is type(right)


def _matches(current: Any, op: str, value: Any) -> bool:
    if current is _MISSING:
        return False
    if op == "==":
        return _same_json_type(current, value) and current == value
    if op == "!=":
        return not (_same_json_type(current, value) and current == value)
    if op == "in":
        return any(_same_json_type(current, v) and current == v for v in value)
    if op == "not-in":
        return not any(_same_json_type(current, v) and current == v for v in value)
    if op == "array-contains":
        return isinstance(current, list) and any(_same_json_type(v, value) and v == value for v in current)

    # Ordering operators only compare values of the same JSON type
    if not _same_json_type(current, value) or isinstance(current, (dict, list)):
        return False
    try:
        if op == "<":
            return current < value
        if op == "<=":
            return current <= value
        if op == ">":
            return current > value
        if op == ">=":
            return current >= value
    except TypeError:
        return False
    raise StoreError(f"Unsupported where operator: {op}")


_TYPE_RANK = ((type(None), 0), (bool, 1), ((int, float), 2), (str, 3), (list, 4), (dict, 5))


def _sort_key(value: Any) -> tuple:
    """Total order over JSON values: null < bool < number < string < array < object"""
    for types, rank in _TYPE_RANK:
        if isinstance(value, types):
            break
    else:
        raise StoreError(f"Not a JSON value: {value!r}")
    if rank == 0:
        return (rank, 0)
    if rank == 4:
        return (rank, tuple(_sort_key(v) for v in value))
    if rank == 5:
        return (rank, tuple(sorted((k, _sort_key(v)) for k, v in value.items())))
    return (rank, value)


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store. Documents keep insertion order within a collection."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    def _documents(self, collection: str) -> Dict[str, Dict[str, Any]]:
        if self._closed:
            raise StoreError("Memory store is closed")
        return self._collections.setdefault(collection, {})

    def _snapshot(self, doc_id: str, data: Dict[str, Any]) -> DocumentSnapshot:
        return DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))

    async def ping(self) -> None:
        if self._closed:
            raise StoreError("Memory store is closed")

    async def close(self) -> None:
        self._closed = True
        logger.info("Memory document store closed")

    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        async with self._lock:
            doc_id = str(uuid.uuid4())
            self._documents(collection)[doc_id] = copy.deepcopy(fields)
            return doc_id

    async def get_by_id(self, collection: str, doc_id: str) -> DocumentSnapshot:
        data = self._documents(collection).get(doc_id)
        if data is None:
            return DocumentSnapshot.missing(doc_id)
        return self._snapshot(doc_id, data)

    async def get_all(self, collection: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        docs = list(self._documents(collection).items())
        if order_by is not None:
            docs = [(doc_id, data) for doc_id, data in docs if order_by in data]
            docs.sort(key=lambda pair: _sort_key(pair[1][order_by]))
        return [self._snapshot(doc_id, data) for doc_id, data in docs]

    async def get_where(self, collection: str, field_name: str, op: str, value: Any) -> List[DocumentSnapshot]:
        if op in ("in", "not-in") and not isinstance(value, (list, tuple)):
            raise StoreError(f"Operator {op} requires a list value")
        return [
            self._snapshot(doc_id, data)
            for doc_id, data in self._documents(collection).items()
            if _matches(data.get(field_name, _MISSING), op, value)
        ]

    async def get_range(self, collection: str, field_name: str, lower: str, upper: str) -> List[DocumentSnapshot]:
        hits = [
            (doc_id, data)
            for doc_id, data in self._documents(collection).items()
            if isinstance(data.get(field_name), str) and lower <= data[field_name] < upper
        ]
        hits.sort(key=lambda pair: pair[1][field_name])
        return [self._snapshot(doc_id, data) for doc_id, data in hits]

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock:
            self._documents(collection).pop(doc_id, None)

    async def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        async with self._lock:
            documents = self._documents(collection)
            if doc_id not in documents:
                raise DocumentNotFound(collection, doc_id)
            documents[doc_id].update(copy.deepcopy(fields))

"""
Items service - data layer for the items collection
"""

import logging
from typing import Any, Dict, List, Optional

from database.documents import CollectionRef, DocumentSnapshot
from models.item import Item
from services import data_access
from services.data_access import NotFoundError

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("title", "content")


def snapshot_to_item(snapshot: DocumentSnapshot) -> Item:
    return Item(
        id=snapshot.id,
        title=str(snapshot.get("title", "")),
        content=str(snapshot.get("content", ""))
    )


class ItemsService:
    """Plain data operations on items; no presentation concerns"""

    def __init__(self, collection: CollectionRef):
        self.collection = collection

    @staticmethod
    def _item_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {name: value for name, value in fields.items() if name in ITEM_FIELDS and value is not None}

    async def list_items(self, order_by: Optional[str] = None) -> List[Item]:
        snapshots = await data_access.select_all(self.collection, order_by)
        return [snapshot_to_item(snapshot) for snapshot in snapshots]

    async def get_item(self, item_id: str) -> Item:
        """
        Get an item by its ID

        Raises:
            NotFoundError: if no item has this ID
        """
        snapshot = await data_access.select_by_id(self.collection, item_id)
        if not snapshot.exists:
            raise NotFoundError(f"Item with ID {item_id} not found", "select_by_id", item_id)
        return snapshot_to_item(snapshot)

    async def create_item(self, fields: Dict[str, Any]) -> Item:
        data = self._item_fields(fields)
        logger.info(f"Creating new item: {data.get('title', '')!r}")
        item_id = await data_access.add(self.collection, data)
        return Item(id=item_id, **data)

    async def update_item(self, item_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial update; fields left out keep their values"""
        data = self._item_fields(fields)
        if not data:
            raise ValueError("No fields provided for update")
        await data_access.update_by_id(self.collection, item_id, data)

    async def delete_item(self, item_id: str) -> None:
        await data_access.delete_by_id(self.collection, item_id)

    async def find_items(self, field: str, operator: str, value: Any) -> List[Item]:
        snapshots = await data_access.select_where(self.collection, field, operator, value)
        return [snapshot_to_item(snapshot) for snapshot in snapshots]

    async def search_items(self, field: str, prefix: str) -> List[Item]:
        snapshots = await data_access.select_like(self.collection, field, prefix)
        return [snapshot_to_item(snapshot) for snapshot in snapshots]

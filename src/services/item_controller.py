"""
Item controller - the user-facing actions of the items page

Each action runs one logical transaction against a single item and returns
the PageState to render: the table rows, the form and at most one alert.
Data-access failures never propagate past an action; they become a generic
danger alert and the page stays usable.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.enums import AlertSeverity, FormMode
from models.item import Item
from services.data_access import FacadeError
from services.items_service import ItemsService

logger = logging.getLogger(__name__)

# User-visible notification messages
ITEM_SAVED = "Item saved successfully"
ITEM_SAVE_FAILED = "Error trying to save the item"
ITEM_DELETED = "Item deleted successfully"
ITEM_DELETE_FAILED = "Error trying to delete the item"
ITEM_EDIT_FAILED = "Error trying to edit the item"
ITEM_UPDATED = "Item updated successfully"
ITEM_UPDATE_FAILED = "Error trying to update the item"
ITEMS_LOAD_FAILED = "Error displaying the items"
ITEMS_SEARCH_FAILED = "Error searching the items"


@dataclass
class Alert:
    message: str
    severity: AlertSeverity


@dataclass
class ItemForm:
    """The title/content inputs plus the hidden elementId"""
    element_id: str = ""
    title: str = ""
    content: str = ""

    @property
    def mode(self) -> FormMode:
        return FormMode.EDIT if self.element_id else FormMode.CREATE


@dataclass
class PageState:
    items: List[Item] = field(default_factory=list)
    form: ItemForm = field(default_factory=ItemForm)
    alert: Optional[Alert] = None
    search: str = ""


def _success(message: str) -> Alert:
    return Alert(message, AlertSeverity.SUCCESS)


def _failure(message: str) -> Alert:
    return Alert(message, AlertSeverity.DANGER)


class ItemController:
    """Binds ItemsService to the items page"""

    def __init__(self, service: ItemsService, search_field: str = "title"):
        self.service = service
        self.search_field = search_field

    async def _reload(self) -> List[Item]:
        # Table content after an action; an unreadable table renders empty
        try:
            return await self.service.list_items()
        except FacadeError as e:
            logger.error(f"Reloading items failed: {e.message}")
            return []

    async def load_items(self) -> PageState:
        """Fetch every item and rebuild the table"""
        try:
            items = await self.service.list_items()
        except FacadeError as e:
            logger.error(f"Loading items failed: {e.message}")
            return PageState(alert=_failure(ITEMS_LOAD_FAILED))
        return PageState(items=items)

    async def search_items(self, prefix: str) -> PageState:
        """Show only the items whose search field starts with prefix"""
        if not prefix:
            return await self.load_items()
        try:
            items = await self.service.search_items(self.search_field, prefix)
        except FacadeError as e:
            logger.error(f"Searching items failed: {e.message}")
            return PageState(alert=_failure(ITEMS_SEARCH_FAILED), search=prefix)
        return PageState(items=items, search=prefix)

    async def add_item(self, fields: Dict[str, str]) -> PageState:
        try:
            await self.service.create_item(fields)
        except FacadeError as e:
            logger.error(f"Add item failed: {e.message}")
            return PageState(
                items=await self._reload(),
                form=ItemForm(title=fields.get("title", ""), content=fields.get("content", "")),
                alert=_failure(ITEM_SAVE_FAILED)
            )
        return PageState(items=await self._reload(), alert=_success(ITEM_SAVED))

    async def delete_item(self, item_id: str) -> PageState:
        try:
            await self.service.delete_item(item_id)
        except FacadeError as e:
            logger.error(f"Delete item failed: {e.message}")
            return PageState(items=await self._reload(), alert=_failure(ITEM_DELETE_FAILED))
        return PageState(items=await self._reload(), alert=_success(ITEM_DELETED))

    async def edit_item(self, item_id: str) -> PageState:
        """Stage an item in the form (edit mode). Read-only."""
        try:
            item = await self.service.get_item(item_id)
        except FacadeError as e:
            logger.error(f"Edit item failed: {e.message}")
            # nothing was staged, so the form stays in create mode
            return PageState(items=await self._reload(), alert=_failure(ITEM_EDIT_FAILED))
        return PageState(
            items=await self._reload(),
            form=ItemForm(element_id=item.id, title=item.title, content=item.content)
        )

    async def update_item(self, item_id: str, fields: Dict[str, str]) -> PageState:
        try:
            await self.service.update_item(item_id, fields)
        except (FacadeError, ValueError) as e:
            logger.error(f"Update item failed for {item_id}: {e}")
            return PageState(
                items=await self._reload(),
                form=ItemForm(
                    element_id=item_id,
                    title=fields.get("title", ""),
                    content=fields.get("content", "")
                ),
                alert=_failure(ITEM_UPDATE_FAILED)
            )
        return PageState(items=await self._reload(), alert=_success(ITEM_UPDATED))

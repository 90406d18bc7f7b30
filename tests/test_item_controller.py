"""
Item controller: page actions, form state machine and notifications
"""

import pytest

from models.enums import AlertSeverity, FormMode
from services import item_controller as messages
from services.item_controller import ItemController
from services.items_service import ItemsService
from infrastructure import FailingDocumentStore


def controller_failing_on(*capabilities) -> ItemController:
    store = FailingDocumentStore(fail_on=set(capabilities))
    return ItemController(ItemsService(store.collection("items")))


class TestItemActions:

    @pytest.mark.asyncio
    async def test_add_item_reloads_and_clears_form(self, controller):
        state = await controller.add_item({"title": "A", "content": "B"})

        assert [(i.title, i.content) for i in state.items] == [("A", "B")]
        assert state.form.mode == FormMode.CREATE
        assert (state.form.title, state.form.content) == ("", "")
        assert state.alert.severity == AlertSeverity.SUCCESS
        assert state.alert.message == messages.ITEM_SAVED

    @pytest.mark.asyncio
    async def test_adding_twice_creates_two_items(self, controller):
        await controller.add_item({"title": "A", "content": "B"})
        state = await controller.add_item({"title": "A", "content": "B"})

        assert len(state.items) == 2
        assert state.items[0].id != state.items[1].id

    @pytest.mark.asyncio
    async def test_delete_item(self, controller, items_service):
        item = await items_service.create_item({"title": "A", "content": "B"})

        state = await controller.delete_item(item.id)

        assert state.items == []
        assert state.alert.message == messages.ITEM_DELETED

    @pytest.mark.asyncio
    async def test_edit_item_enters_edit_mode(self, controller, items_service):
        item = await items_service.create_item({"title": "A", "content": "B"})

        state = await controller.edit_item(item.id)

        assert state.form.mode == FormMode.EDIT
        assert state.form.element_id == item.id
        assert (state.form.title, state.form.content) == ("A", "B")
        assert state.alert is None

    @pytest.mark.asyncio
    async def test_edit_missing_item_shows_failure(self, controller):
        state = await controller.edit_item("ghost")

        assert state.form.mode == FormMode.CREATE
        assert state.alert.severity == AlertSeverity.DANGER
        assert state.alert.message == messages.ITEM_EDIT_FAILED

    @pytest.mark.asyncio
    async def test_update_item_returns_to_create_mode(self, controller, items_service):
        item = await items_service.create_item({"title": "A", "content": "B"})
        await controller.edit_item(item.id)

        state = await controller.update_item(item.id, {"title": "A2", "content": "B2"})

        assert state.form.mode == FormMode.CREATE
        assert state.form.element_id == ""
        assert [(i.id, i.title, i.content) for i in state.items] == [(item.id, "A2", "B2")]
        assert state.alert.message == messages.ITEM_UPDATED

    @pytest.mark.asyncio
    async def test_update_missing_item_keeps_form(self, controller):
        state = await controller.update_item("ghost", {"title": "A", "content": "B"})

        assert state.form.mode == FormMode.EDIT
        assert state.form.title == "A"
        assert state.alert.message == messages.ITEM_UPDATE_FAILED

    @pytest.mark.asyncio
    async def test_search_items_by_title_prefix(self, controller, items_service):
        for title in ("apple", "apricot", "banana"):
            await items_service.create_item({"title": title, "content": ""})

        state = await controller.search_items("ap")

        assert [i.title for i in state.items] == ["apple", "apricot"]
        assert state.search == "ap"

    @pytest.mark.asyncio
    async def test_empty_search_loads_everything(self, controller, items_service):
        await items_service.create_item({"title": "x", "content": ""})

        state = await controller.search_items("")

        assert len(state.items) == 1


class TestItemActionFailures:
    """A failing store never escapes an action"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("capability,action,message", [
        ("add", lambda c: c.add_item({"title": "A", "content": "B"}), messages.ITEM_SAVE_FAILED),
        ("delete", lambda c: c.delete_item("some-id"), messages.ITEM_DELETE_FAILED),
        ("get_by_id", lambda c: c.edit_item("some-id"), messages.ITEM_EDIT_FAILED),
        ("update", lambda c: c.update_item("some-id", {"title": "A"}), messages.ITEM_UPDATE_FAILED),
        ("get_all", lambda c: c.load_items(), messages.ITEMS_LOAD_FAILED),
        ("get_range", lambda c: c.search_items("a"), messages.ITEMS_SEARCH_FAILED),
    ])
    async def test_failure_becomes_generic_alert(self, capability, action, message):
        state = await action(controller_failing_on(capability))

        assert state.alert.severity == AlertSeverity.DANGER
        assert state.alert.message == message
        assert "simulated" not in state.alert.message

    @pytest.mark.asyncio
    async def test_failed_add_keeps_submitted_values(self):
        state = await controller_failing_on("add").add_item({"title": "A", "content": "B"})

        assert (state.form.title, state.form.content) == ("A", "B")
        assert state.form.mode == FormMode.CREATE

    @pytest.mark.asyncio
    async def test_unreadable_table_after_success_renders_empty(self):
        state = await controller_failing_on("get_all").add_item({"title": "A", "content": "B"})

        assert state.items == []
        assert state.alert.message == messages.ITEM_SAVED

"""
Items page - server-rendered form and results table
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.templating import Jinja2Templates

from services.item_controller import ItemController, PageState
from api.dependencies import get_item_controller

router = APIRouter()
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_page(request: Request, state: PageState):
    # Jinja2Templates autoescapes .html templates, so field values are inert
    return templates.TemplateResponse(request, "items.html", {"page": state})


@router.get("/")
async def items_page(
    request: Request,
    q: str = "",
    controller: ItemController = Depends(get_item_controller)
):
    """Render every item, or the items whose title starts with q"""
    if q:
        state = await controller.search_items(q)
    else:
        state = await controller.load_items()
    return render_page(request, state)


@router.post("/items")
async def submit_item(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    elementId: str = Form(""),
    controller: ItemController = Depends(get_item_controller)
):
    """Add a new item, or update the one staged in the form"""
    fields = {"title": title, "content": content}
    if elementId:
        state = await controller.update_item(elementId, fields)
    else:
        state = await controller.add_item(fields)
    return render_page(request, state)


@router.post("/items/{item_id}/delete", name="page_delete_item")
async def delete_item(
    request: Request,
    item_id: str,
    controller: ItemController = Depends(get_item_controller)
):
    state = await controller.delete_item(item_id)
    return render_page(request, state)


@router.get("/items/{item_id}/edit", name="page_edit_item")
async def edit_item(
    request: Request,
    item_id: str,
    controller: ItemController = Depends(get_item_controller)
):
    state = await controller.edit_item(item_id)
    return render_page(request, state)

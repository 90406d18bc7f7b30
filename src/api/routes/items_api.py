"""
Items JSON API routes
All data access goes through ItemsService; no direct store access.
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from models.item import Item, ItemCreateRequest, ItemListResponse, ItemUpdateRequest, WhereOperator
from services.items_service import ItemsService
from api.dependencies import get_items_service

router = APIRouter()
logger = logging.getLogger(__name__)


def parse_query_value(raw: str) -> Any:
    """JSON-decode a query value, falling back to the raw string (so ?value=A means "A")"""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _list_response(items) -> ItemListResponse:
    return ItemListResponse(count=len(items), items=items)


@router.get("", response_model=ItemListResponse)
async def list_items(
    order_by: Optional[str] = Query(None, description="Field to sort ascending by"),
    service: ItemsService = Depends(get_items_service)
):
    """List every item"""
    return _list_response(await service.list_items(order_by))


@router.get("/query/where", response_model=ItemListResponse)
async def query_items_where(
    field: str = Query(..., min_length=1),
    op: WhereOperator = Query(WhereOperator.EQ),
    value: str = Query(..., description="JSON value; bare text is taken as a string"),
    service: ItemsService = Depends(get_items_service)
):
    """Items whose field satisfies `field op value`"""
    parsed = parse_query_value(value)
    if op in (WhereOperator.IN, WhereOperator.NOT_IN) and not isinstance(parsed, list):
        raise HTTPException(status_code=400, detail=f"Operator {op.value} requires a JSON array value")
    return _list_response(await service.find_items(field, op.value, parsed))


@router.get("/query/like", response_model=ItemListResponse)
async def query_items_like(
    field: str = Query("title", min_length=1),
    prefix: str = Query(""),
    service: ItemsService = Depends(get_items_service)
):
    """Items whose field starts with prefix"""
    return _list_response(await service.search_items(field, prefix))


@router.get("/{item_id}", response_model=Item)
async def get_item(item_id: str, service: ItemsService = Depends(get_items_service)):
    """Get item details; NotFoundError becomes a 404"""
    return await service.get_item(item_id)


@router.post("", response_model=Item, status_code=201)
async def create_item(request: ItemCreateRequest, service: ItemsService = Depends(get_items_service)):
    """Create a new item"""
    return await service.create_item(request.model_dump())


@router.put("/{item_id}", response_model=Item)
async def update_item(
    item_id: str,
    request: ItemUpdateRequest,
    service: ItemsService = Depends(get_items_service)
):
    """Update some fields of an item"""
    updates = request.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    await service.update_item(item_id, updates)
    return await service.get_item(item_id)


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, service: ItemsService = Depends(get_items_service)):
    """Delete an item; deleting a missing item succeeds"""
    await service.delete_item(item_id)
    return Response(status_code=204)

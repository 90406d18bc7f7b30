"""
Request-scoped access to the store client built at startup
"""

from fastapi import Depends, HTTPException, Request

from database.documents import CollectionRef, DocumentStore
from services.item_controller import ItemController
from services.items_service import ItemsService


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Document store not initialized")
    return store


def get_items_collection(request: Request, store: DocumentStore = Depends(get_store)) -> CollectionRef:
    return store.collection(request.app.state.items_collection)


def get_items_service(collection: CollectionRef = Depends(get_items_collection)) -> ItemsService:
    return ItemsService(collection)


def get_item_controller(service: ItemsService = Depends(get_items_service)) -> ItemController:
    return ItemController(service)

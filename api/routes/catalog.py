# api/routes/catalog.py

from typing import Any, Dict, Optional, Union
from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import RedirectResponse

from api.schemas import ViewResponse
from catalog.services import CatalogHandler, Redirect, View

router = APIRouter(prefix="/catalog", tags=["catalog"])

def get_handler(request: Request) -> CatalogHandler:
    return request.app.state.handler

def render(response: Union[View, Redirect]):
    """Views become JSON, redirects a 303 to the target page"""
    if isinstance(response, Redirect):
        return RedirectResponse(response.path, status_code=status.HTTP_303_SEE_OTHER)
    return ViewResponse(view=response.view, context=response.context)

@router.get("/", response_model=None)
def index(handler: CatalogHandler = Depends(get_handler)):
    """Home page with record counts"""
    return render(handler.handle('index'))

@router.get("/{kinds}", response_model=None)
def list_entities(kinds: str, handler: CatalogHandler = Depends(get_handler)):
    """
    List every record of a kind in its default order.

    Args:
        kinds: Plural kind name (authors, genres, books, bookinstances)
    """
    return render(handler.handle('list', kinds))

@router.get("/{kind}/create", response_model=None)
def create_form(kind: str, handler: CatalogHandler = Depends(get_handler)):
    return render(handler.handle('create_get', kind))

@router.post("/{kind}/create", response_model=None)
def create_entity(
    kind: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    handler: CatalogHandler = Depends(get_handler)
):
    """Create a record from the submitted fields, or return the form with errors"""
    return render(handler.handle('create_post', kind, raw_fields=fields or {}))

@router.get("/{kind}/{entity_id}", response_model=None)
def entity_detail(kind: str, entity_id: str, handler: CatalogHandler = Depends(get_handler)):
    return render(handler.handle('detail', kind, {'id': entity_id}))

@router.get("/{kind}/{entity_id}/update", response_model=None)
def update_form(kind: str, entity_id: str, handler: CatalogHandler = Depends(get_handler)):
    return render(handler.handle('update_get', kind, {'id': entity_id}))

@router.post("/{kind}/{entity_id}/update", response_model=None)
def update_entity(
    kind: str,
    entity_id: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    handler: CatalogHandler = Depends(get_handler)
):
    """Replace every field of a record, or return the form with errors"""
    return render(handler.handle('update_post', kind, {'id': entity_id}, fields or {}))

@router.get("/{kind}/{entity_id}/delete", response_model=None)
def delete_form(kind: str, entity_id: str, handler: CatalogHandler = Depends(get_handler)):
    return render(handler.handle('delete_get', kind, {'id': entity_id}))

@router.post("/{kind}/{entity_id}/delete", response_model=None)
def delete_entity(kind: str, entity_id: str, handler: CatalogHandler = Depends(get_handler)):
    """Delete a record, or list the records that still reference it"""
    return render(handler.handle('delete_post', kind, {'id': entity_id}))

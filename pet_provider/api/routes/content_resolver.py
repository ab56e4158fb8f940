"""Content Resolver Routes — query/insert/update/delete/type over HTTP.

Invariants:
    - Routes are thin: every call goes straight to PetProvider
    - PetProviderError propagates to the global handler (error_handlers.py)
    - insert returns 201 with the new item URI

Design Decisions:
    - POST with JSON body for query/update/delete: selections are structured
      predicates, not query-string SQL
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from pet_provider.api.dependencies import get_provider
from pet_provider.schemas.resolver import (
    CursorResponse, DeleteRequest, InsertRequest, InsertResponse,
    QueryRequest, RowsAffectedResponse, TypeResponse, UpdateRequest,
    to_predicates,
)
from pet_provider.services.pet_provider import PetProvider

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/resolver", tags=["resolver"])


@router.post("/query", response_model=CursorResponse)
async def query(
    body: QueryRequest, provider: PetProvider = Depends(get_provider),
):
    """Rows at a collection or item URI."""
    cursor = await provider.query(
        body.uri, body.projection, to_predicates(body.selection), body.sort_order,
    )
    return CursorResponse(**cursor.to_dict())


@router.post(
    "/insert", response_model=InsertResponse,
    status_code=status.HTTP_201_CREATED,
)
async def insert(
    body: InsertRequest, provider: PetProvider = Depends(get_provider),
):
    """Insert a pet into the collection URI."""
    new_uri = await provider.insert(body.uri, body.values)
    return InsertResponse(uri=new_uri)


@router.post("/update", response_model=RowsAffectedResponse)
async def update(
    body: UpdateRequest, provider: PetProvider = Depends(get_provider),
):
    """Partial update of the rows at a URI."""
    rows = await provider.update(
        body.uri, body.values, to_predicates(body.selection),
    )
    return RowsAffectedResponse(uri=body.uri, rows_affected=rows)


@router.post("/delete", response_model=RowsAffectedResponse)
async def delete(
    body: DeleteRequest, provider: PetProvider = Depends(get_provider),
):
    """Delete the rows at a URI."""
    rows = await provider.delete(body.uri, to_predicates(body.selection))
    return RowsAffectedResponse(uri=body.uri, rows_affected=rows)


@router.get("/type", response_model=TypeResponse)
async def get_type(
    uri: str = Query(..., min_length=1),
    provider: PetProvider = Depends(get_provider),
):
    """MIME type of a URI (list vs single pet)."""
    return TypeResponse(
        uri=uri,
        kind=provider.resource_kind(uri),
        mime_type=provider.get_type(uri),
    )

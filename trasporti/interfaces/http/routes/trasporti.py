from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query, status

from trasporti.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from trasporti.interfaces.dependencies import get_current_claims, get_trasporto_service
from trasporti.schemas.trasporto import SchemaResponse, TrasportoFilters, TrasportoList
from trasporti.services import TrasportoService

# Every route requires a valid bearer token
router = APIRouter(dependencies=[Depends(get_current_claims)])


@router.get("", response_model=TrasportoList)
async def list_trasporti(
    filters: TrasportoFilters = Depends(),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str = Query("-created_at"),
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    """Paginated list with optional filters"""
    return await service.list_trasporti(filters, page=page, limit=limit, sort=sort)


@router.get("/search", response_model=TrasportoList)
async def search_trasporti(
    filters: TrasportoFilters = Depends(),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str = Query("-created_at"),
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    return await service.list_trasporti(filters, page=page, limit=limit, sort=sort)


@router.get("/recent")
async def recent_trasporti(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: TrasportoService = Depends(get_trasporto_service),
) -> List[Dict[str, Any]]:
    """Records created in the last week, newest first"""
    return await service.recent(limit=limit)


@router.get("/schema", response_model=SchemaResponse)
async def get_schema(service: TrasportoService = Depends(get_trasporto_service)) -> Dict[str, Any]:
    schema = await service.get_schema()
    return {**schema.to_dict(), "version": schema.version}


@router.get("/{record_id}")
async def get_trasporto(
    record_id: str,
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    return await service.get(record_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_trasporto(
    body: Dict[str, Any] = Body(...),
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    return await service.create(body)


@router.put("/{record_id}")
async def replace_trasporto(
    record_id: str,
    body: Dict[str, Any] = Body(...),
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    return await service.update(record_id, body)


@router.patch("/{record_id}")
async def patch_trasporto(
    record_id: str,
    body: Dict[str, Any] = Body(...),
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, Any]:
    return await service.update(record_id, body, partial=True)


@router.delete("/{record_id}")
async def delete_trasporto(
    record_id: str,
    service: TrasportoService = Depends(get_trasporto_service),
) -> Dict[str, bool]:
    await service.delete(record_id)
    return {"ok": True}

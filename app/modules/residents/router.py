import uuid
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.errors import NotFoundError
from app.core.security import require_admin
from app.modules.residents.schemas import ResidentCreate, ResidentUpdate, ResidentOut
from app.modules.residents.service import ResidentService

router = APIRouter(dependencies=[Depends(require_admin)])

def svc(session: AsyncSession = Depends(get_session)) -> ResidentService:
    return ResidentService(session)

# static paths first; /{resident_id} would otherwise swallow them

@router.get("", response_model=list[ResidentOut])
async def list_residents(service: ResidentService = Depends(svc)):
    return await service.list_all()

@router.get("/search", response_model=list[ResidentOut])
async def search_residents(q: str = "", service: ResidentService = Depends(svc)):
    return await service.search_by_name(q)

@router.get("/by-room/{room_number}", response_model=list[ResidentOut])
async def residents_by_room(room_number: str, service: ResidentService = Depends(svc)):
    return await service.get_by_room_number(room_number)

@router.get("/by-care-level/{care_level}", response_model=list[ResidentOut])
async def residents_by_care_level(care_level: int = Path(..., ge=1, le=5), service: ResidentService = Depends(svc)):
    return await service.get_by_care_level(care_level)

@router.get("/by-medication", response_model=list[ResidentOut])
async def residents_by_medication(name: str = "", service: ResidentService = Depends(svc)):
    return await service.get_by_medication(name)

@router.post("", response_model=ResidentOut, status_code=201)
async def create_resident(payload: ResidentCreate, service: ResidentService = Depends(svc)):
    return await service.create(payload)

@router.get("/{resident_id}", response_model=ResidentOut)
async def get_resident(resident_id: uuid.UUID, service: ResidentService = Depends(svc)):
    obj = await service.get(resident_id)
    if not obj:
        raise NotFoundError(operation="read")
    return obj

@router.patch("/{resident_id}", response_model=ResidentOut)
async def update_resident(resident_id: uuid.UUID, payload: ResidentUpdate, service: ResidentService = Depends(svc)):
    return await service.update(resident_id, payload)

@router.delete("/{resident_id}", status_code=204)
async def delete_resident(
    resident_id: uuid.UUID,
    with_records: bool = Query(False),
    service: ResidentService = Depends(svc),
):
    await service.delete(resident_id, with_records=with_records)

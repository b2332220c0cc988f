import uuid
import datetime as dt
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import require_admin
from app.modules.medical_records.schemas import MedicalRecordCreate, MedicalRecordUpdate, MedicalRecordOut
from app.modules.medical_records.service import MedicalRecordService

router = APIRouter(dependencies=[Depends(require_admin)])

def svc(session: AsyncSession = Depends(get_session)) -> MedicalRecordService:
    return MedicalRecordService(session)

@router.get("/residents/{resident_id}/medical-records", response_model=list[MedicalRecordOut])
async def list_medical_records(resident_id: uuid.UUID, service: MedicalRecordService = Depends(svc)):
    return await service.get_by_resident_id(resident_id)

@router.get("/residents/{resident_id}/medical-records/existing", response_model=MedicalRecordOut)
async def existing_medical_record(resident_id: uuid.UUID, date: dt.date, service: MedicalRecordService = Depends(svc)):
    obj = await service.check_existing_record(resident_id, date)
    if not obj:
        return Response(status_code=204)
    return obj

@router.post("/residents/{resident_id}/medical-records", response_model=MedicalRecordOut, status_code=201)
async def create_medical_record(
    resident_id: uuid.UUID,
    payload: MedicalRecordCreate,
    service: MedicalRecordService = Depends(svc),
):
    return await service.create(resident_id, payload)

@router.patch("/medical-records/{record_id}", response_model=MedicalRecordOut)
async def update_medical_record(
    record_id: uuid.UUID,
    payload: MedicalRecordUpdate,
    service: MedicalRecordService = Depends(svc),
):
    return await service.update(record_id, payload)

@router.delete("/medical-records/{record_id}", status_code=204)
async def delete_medical_record(record_id: uuid.UUID, service: MedicalRecordService = Depends(svc)):
    await service.delete(record_id)

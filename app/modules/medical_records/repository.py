import uuid
import datetime as dt
from typing import Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.base import utcnow
from app.modules.medical_records.models import MedicalRecord

def as_day(value: dt.date | dt.datetime | str) -> dt.date:
    """Calendar day of a date, datetime or ISO string; time of day is dropped."""
    if isinstance(value, str):
        value = dt.datetime.fromisoformat(value) if "T" in value or " " in value else dt.date.fromisoformat(value)
    if isinstance(value, dt.datetime):
        return value.date()
    return value

class MedicalRecordRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, resident_id: uuid.UUID, **data) -> MedicalRecord:
        now = utcnow()
        obj = MedicalRecord(
            resident_id=resident_id,
            date=as_day(data["date"]),
            record=data["record"],
            created_at=now,
            updated_at=now,
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, record_id: uuid.UUID) -> MedicalRecord | None:
        res = await self.session.execute(select(MedicalRecord).where(MedicalRecord.id == record_id))
        return res.scalar_one_or_none()

    async def list_for_resident(self, resident_id: uuid.UUID) -> Sequence[MedicalRecord]:
        q = select(MedicalRecord).where(
            MedicalRecord.resident_id == resident_id,
        ).order_by(MedicalRecord.date.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def check_existing_record(self, resident_id: uuid.UUID, day: dt.date | dt.datetime | str) -> MedicalRecord | None:
        q = select(MedicalRecord).where(
            MedicalRecord.resident_id == resident_id,
            MedicalRecord.date == as_day(day),
        ).order_by(MedicalRecord.created_at.asc()).limit(1)
        res = await self.session.execute(q)
        return res.scalars().first()

    async def update(self, record_id: uuid.UUID, **data) -> MedicalRecord | None:
        obj = await self.get(record_id)
        if not obj:
            return None
        if data.get("date") is not None:
            obj.date = as_day(data["date"])
        if data.get("record") is not None:
            obj.record = data["record"]
        obj.updated_at = utcnow()
        await self.session.flush()
        return obj

    async def delete(self, record_id: uuid.UUID) -> bool:
        obj = await self.get(record_id)
        if not obj:
            return False
        await self.session.delete(obj)
        await self.session.flush()
        return True

    async def delete_for_resident(self, resident_id: uuid.UUID) -> int:
        res = await self.session.execute(delete(MedicalRecord).where(MedicalRecord.resident_id == resident_id))
        return res.rowcount or 0

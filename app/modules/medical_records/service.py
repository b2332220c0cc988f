import uuid
import logging
import datetime as dt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import ConflictError, NotFoundError
from app.modules.medical_records.repository import MedicalRecordRepository, as_day
from app.modules.medical_records.schemas import MedicalRecordCreate, MedicalRecordUpdate
from app.modules.medical_records.models import MedicalRecord

logger = logging.getLogger(__name__)

def duplicate_day_message(day: dt.date) -> str:
    return f"{day:%Y年%m月%d日}の診療録は既に存在します。既存の記録を編集してください。"

class MedicalRecordService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = MedicalRecordRepository(session)

    async def get_by_resident_id(self, resident_id: uuid.UUID):
        records = await self.repo.list_for_resident(resident_id)
        logger.debug(f"Fetched {len(records)} medical records for resident {resident_id}")
        return records

    async def check_existing_record(self, resident_id: uuid.UUID, day: dt.date | dt.datetime | str) -> MedicalRecord | None:
        return await self.repo.check_existing_record(resident_id, day)

    async def create(self, resident_id: uuid.UUID, payload: MedicalRecordCreate) -> MedicalRecord:
        day = as_day(payload.date)
        existing = await self.repo.check_existing_record(resident_id, day)
        if existing:
            logger.info(f"Medical record for resident {resident_id} on {day} already exists: {existing.id}")
            raise ConflictError(duplicate_day_message(day), operation="create")
        try:
            obj = await self.repo.create(resident_id, **payload.model_dump())
            await self.session.commit()
        except IntegrityError:
            # lost the race against a concurrent create for the same day
            await self.session.rollback()
            logger.warning(f"Concurrent medical record create for resident {resident_id} on {day}")
            raise ConflictError(duplicate_day_message(day), operation="create")
        except Exception:
            logger.exception(f"Failed to create medical record for resident {resident_id}")
            await self.session.rollback()
            raise
        logger.info(f"Medical record created: {obj.id} (resident {resident_id}, {day})")
        return obj

    async def update(self, record_id: uuid.UUID, payload: MedicalRecordUpdate) -> MedicalRecord:
        data = payload.model_dump(exclude_unset=True)
        try:
            obj = await self.repo.update(record_id, **data)
            if obj:
                await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning(f"Medical record {record_id} update collides with an existing day")
            if data.get("date") is None:
                raise ConflictError(operation="update")
            raise ConflictError(duplicate_day_message(as_day(data["date"])), operation="update")
        except Exception:
            logger.exception(f"Failed to update medical record {record_id}")
            await self.session.rollback()
            raise
        if not obj:
            raise NotFoundError(operation="update")
        logger.info(f"Medical record updated: {record_id} fields={sorted(data)}")
        return obj

    async def delete(self, record_id: uuid.UUID) -> bool:
        try:
            ok = await self.repo.delete(record_id)
            await self.session.commit()
        except Exception:
            logger.exception(f"Failed to delete medical record {record_id}")
            await self.session.rollback()
            raise
        logger.info(f"Medical record delete {record_id}: found={ok}")
        return ok

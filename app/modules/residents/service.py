import uuid
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import NotFoundError
from app.modules.residents.repository import ResidentRepository
from app.modules.residents.schemas import ResidentCreate, ResidentUpdate
from app.modules.residents.models import Resident
from app.modules.medical_records.repository import MedicalRecordRepository

logger = logging.getLogger(__name__)

class ResidentService:
    def __init__(self, session: AsyncSession):
        self.repo = ResidentRepository(session)
        self.records = MedicalRecordRepository(session)
        self.session = session

    async def create(self, payload: ResidentCreate) -> Resident:
        logger.info(f"Creating resident (room {payload.room_number})")
        try:
            obj = await self.repo.create(**payload.model_dump())
            await self.session.commit()
        except Exception:
            logger.exception("Failed to create resident")
            await self.session.rollback()
            raise
        logger.info(f"Resident created: {obj.id}")
        return obj

    async def get(self, resident_id: uuid.UUID) -> Resident | None:
        return await self.repo.get(resident_id)

    async def list_all(self):
        residents = await self.repo.list_all()
        logger.debug(f"Fetched {len(residents)} residents")
        return residents

    async def update(self, resident_id: uuid.UUID, payload: ResidentUpdate) -> Resident:
        try:
            obj = await self.repo.update(resident_id, **payload.model_dump(exclude_unset=True))
            if obj:
                await self.session.commit()
        except Exception:
            logger.exception(f"Failed to update resident {resident_id}")
            await self.session.rollback()
            raise
        if not obj:
            raise NotFoundError(operation="update")
        logger.info(f"Resident updated: {resident_id} fields={sorted(payload.model_fields_set)}")
        return obj

    async def delete(self, resident_id: uuid.UUID, with_records: bool = False) -> bool:
        # records are orphaned unless the caller asks for them to go in the same transaction
        removed_records = 0
        try:
            if with_records:
                removed_records = await self.records.delete_for_resident(resident_id)
            ok = await self.repo.delete(resident_id)
            await self.session.commit()
        except Exception:
            logger.exception(f"Failed to delete resident {resident_id}")
            await self.session.rollback()
            raise
        logger.info(f"Resident delete {resident_id}: found={ok} records_removed={removed_records}")
        return ok

    async def search_by_name(self, query: str):
        try:
            results = await self.repo.search_by_name(query)
        except Exception:
            logger.exception(f"Search by name failed: {query!r}")
            raise
        logger.info(f"Search completed: {query!r} -> {len(results)} residents")
        return results

    async def get_by_room_number(self, room_number: str):
        return await self.repo.list_by_room_number(room_number)

    async def get_by_care_level(self, care_level: int):
        return await self.repo.list_by_care_level(care_level)

    async def get_by_medication(self, medication: str):
        return await self.repo.list_by_medication(medication)

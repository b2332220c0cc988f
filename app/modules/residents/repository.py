import asyncio
import logging
import uuid
from typing import Sequence
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.core.base import utcnow
from app.core.kana import to_katakana
from app.modules.residents.models import Resident, ResidentMedication

logger = logging.getLogger(__name__)

# Sorts after any realistic input; [q, q + PREFIX_SENTINEL) is a "starts with q" range.
PREFIX_SENTINEL = "\uf8ff"

# fields that may be cleared explicitly on update
_NULLABLE_FIELDS = {"discharge_date", "care_level"}

def split_name(full: str) -> tuple[str, str]:
    """Split a full name on its first whitespace run (half- or full-width) into (last, first)."""
    parts = full.strip().split(None, 1)
    last = parts[0] if parts else ""
    first = parts[1] if len(parts) > 1 else ""
    return last, first

def _medication_rows(names: list[str]) -> list[ResidentMedication]:
    return [ResidentMedication(name=n, position=i) for i, n in enumerate(names)]

def _by_name(residents) -> list[Resident]:
    return sorted(residents, key=lambda r: r.name)

class ResidentRepository:
    def __init__(self, session: AsyncSession, session_factory: async_sessionmaker | None = None):
        self.session = session
        # search fans out over independent sessions; one AsyncSession can't run queries concurrently
        self.session_factory = session_factory or async_sessionmaker(session.bind, expire_on_commit=False, class_=AsyncSession)

    async def create(self, **data) -> Resident:
        last_name, first_name = split_name(data["name"])
        last_kana, first_kana = split_name(data["furigana"])
        now = utcnow()
        obj = Resident(
            name=data["name"],
            furigana=data["furigana"],
            last_name=last_name,
            first_name=first_name,
            last_name_kana=last_kana,
            first_name_kana=first_kana,
            gender=data["gender"],
            birth_date=data["birth_date"],
            room_number=data["room_number"],
            admission_date=data["admission_date"],
            discharge_date=data.get("discharge_date"),
            medical_history=data.get("medical_history") or "",
            care_level=data.get("care_level"),
            medication_rows=_medication_rows(data.get("medications") or []),
            created_at=now,
            updated_at=now,
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, resident_id: uuid.UUID) -> Resident | None:
        res = await self.session.execute(select(Resident).where(Resident.id == resident_id))
        return res.scalar_one_or_none()

    async def update(self, resident_id: uuid.UUID, **data) -> Resident | None:
        obj = await self.get(resident_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is None and k not in _NULLABLE_FIELDS:
                continue
            if k == "name":
                obj.name = v
                obj.last_name, obj.first_name = split_name(v)
            elif k == "furigana":
                obj.furigana = v
                obj.last_name_kana, obj.first_name_kana = split_name(v)
            elif k == "medications":
                obj.medication_rows = _medication_rows(v)
            else:
                setattr(obj, k, v)
        obj.updated_at = utcnow()
        await self.session.flush()
        return obj

    async def delete(self, resident_id: uuid.UUID) -> bool:
        obj = await self.get(resident_id)
        if not obj:
            return False
        await self.session.delete(obj)
        await self.session.flush()
        return True

    async def list_all(self) -> Sequence[Resident]:
        res = await self.session.execute(select(Resident).order_by(Resident.name.asc()))
        return res.scalars().all()

    async def list_by_room_number(self, room_number: str) -> Sequence[Resident]:
        res = await self.session.execute(select(Resident).where(Resident.room_number == room_number))
        return res.scalars().all()

    async def list_by_care_level(self, care_level: int) -> Sequence[Resident]:
        q = select(Resident).where(Resident.care_level == care_level).order_by(Resident.name.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_by_medication(self, medication: str) -> Sequence[Resident]:
        term = medication.strip()
        if not term:
            return []
        q = select(Resident).where(
            Resident.medication_rows.any(ResidentMedication.name == term)
        ).order_by(Resident.name.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def _run_query(self, q) -> Sequence[Resident]:
        async with self.session_factory() as s:
            res = await s.execute(q)
            return res.scalars().all()

    def _prefix_queries(self, term: str) -> list:
        kana = to_katakana(term)
        targets = [
            (Resident.name, term),
            (Resident.last_name, term),
            (Resident.first_name, term),
            (Resident.furigana, kana),
            (Resident.last_name_kana, kana),
            (Resident.first_name_kana, kana),
        ]
        return [
            select(Resident).where(and_(col >= value, col < value + PREFIX_SENTINEL))
            for col, value in targets
        ]

    async def search_by_name(self, query: str) -> list[Resident]:
        term = query.strip()
        if not term:
            return []
        # all-or-nothing: the first failing sub-query fails the search
        results = await asyncio.gather(*(self._run_query(q) for q in self._prefix_queries(term)))
        merged: dict[uuid.UUID, Resident] = {}
        for rows in results:
            for r in rows:
                merged[r.id] = r
        logger.debug("name search %r: %d sub-query hits, %d residents", term, sum(len(r) for r in results), len(merged))
        return _by_name(merged.values())

"""
Tests for medical records: one note per resident per day, ordering, and error propagation.
"""
import logging
import uuid
from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import ConflictError, NotFoundError
from app.modules.medical_records.repository import MedicalRecordRepository, as_day
from app.modules.medical_records.schemas import MedicalRecordCreate, MedicalRecordUpdate
from app.modules.medical_records.service import MedicalRecordService
from app.modules.residents.repository import ResidentRepository
from app.modules.residents.schemas import ResidentCreate
from app.modules.residents.service import ResidentService


def note(day, text="食事摂取良好。"):
    return MedicalRecordCreate(date=day, record=text)


class TestAsDay:
    def test_date_passes_through(self):
        assert as_day(date(2024, 3, 10)) == date(2024, 3, 10)

    def test_datetime_drops_time_of_day(self):
        assert as_day(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)

    def test_iso_strings(self):
        assert as_day("2024-03-10") == date(2024, 3, 10)
        assert as_day("2024-03-10T08:15:00") == date(2024, 3, 10)


@pytest.mark.asyncio
async def test_second_note_for_same_day_is_a_conflict(session):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    await service.create(resident_id, note("2024-03-10"))

    with pytest.raises(ConflictError) as exc:
        await service.create(resident_id, note("2024-03-10", "夜間不穏あり。"))
    assert exc.value.code == "already-exists"
    assert "2024年03月10日の診療録は既に存在します" in exc.value.message

    created = await service.create(resident_id, note("2024-03-11"))
    assert created.date == date(2024, 3, 11)


@pytest.mark.asyncio
async def test_same_day_for_different_residents_is_fine(session):
    service = MedicalRecordService(session)
    await service.create(uuid.uuid4(), note(date(2024, 3, 10)))
    await service.create(uuid.uuid4(), note(date(2024, 3, 10)))


@pytest.mark.asyncio
async def test_check_existing_record_compares_calendar_day(session):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    created = await service.create(resident_id, note(date(2024, 3, 10)))

    found = await service.check_existing_record(resident_id, "2024-03-10T18:30:00")
    assert found.id == created.id
    assert await service.check_existing_record(resident_id, date(2024, 3, 9)) is None
    assert await service.check_existing_record(uuid.uuid4(), date(2024, 3, 10)) is None


@pytest.mark.asyncio
async def test_records_listed_most_recent_first(session):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    for day in [date(2024, 3, 10), date(2024, 5, 1), date(2023, 12, 31)]:
        await service.create(resident_id, note(day))
    await service.create(uuid.uuid4(), note(date(2025, 1, 1)))

    records = await service.get_by_resident_id(resident_id)
    assert [r.date for r in records] == [date(2024, 5, 1), date(2024, 3, 10), date(2023, 12, 31)]


@pytest.mark.asyncio
async def test_read_failures_propagate():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("unavailable"))
    service = MedicalRecordService(session)

    with pytest.raises(OperationalError):
        await service.get_by_resident_id(uuid.uuid4())
    with pytest.raises(OperationalError):
        await service.check_existing_record(uuid.uuid4(), date(2024, 3, 10))
    # a failed uniqueness check must not let create go ahead
    with pytest.raises(OperationalError):
        await service.create(uuid.uuid4(), note(date(2024, 3, 10)))
    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_store_constraint_catches_a_create_that_slipped_past_the_check(session, monkeypatch):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    await service.create(resident_id, note(date(2024, 3, 10)))

    async def stale_check(*args, **kwargs):
        return None

    monkeypatch.setattr(service.repo, "check_existing_record", stale_check)
    with pytest.raises(ConflictError) as exc:
        await service.create(resident_id, note(date(2024, 3, 10)))
    assert "2024年03月10日" in exc.value.message

    assert len(await service.get_by_resident_id(resident_id)) == 1


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(session):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    created = await service.create(resident_id, note(date(2024, 3, 10), "歩行時見守り必要。"))

    updated = await service.update(created.id, MedicalRecordUpdate(record="転倒リスクあり。"))
    assert updated.record == "転倒リスクあり。"
    assert updated.date == date(2024, 3, 10)
    assert updated.resident_id == resident_id

    moved = await service.update(created.id, MedicalRecordUpdate(date=date(2024, 3, 12)))
    assert moved.date == date(2024, 3, 12)
    assert moved.record == "転倒リスクあり。"


@pytest.mark.asyncio
async def test_update_onto_an_occupied_day_is_a_conflict(session):
    service = MedicalRecordService(session)
    resident_id = uuid.uuid4()
    await service.create(resident_id, note(date(2024, 3, 10)))
    other = await service.create(resident_id, note(date(2024, 3, 11)))

    with pytest.raises(ConflictError):
        await service.update(other.id, MedicalRecordUpdate(date=date(2024, 3, 10)))

    days = sorted(r.date for r in await service.get_by_resident_id(resident_id))
    assert days == [date(2024, 3, 10), date(2024, 3, 11)]


@pytest.mark.asyncio
async def test_update_unknown_record_is_not_found(session):
    with pytest.raises(NotFoundError):
        await MedicalRecordService(session).update(uuid.uuid4(), MedicalRecordUpdate(record="x"))


@pytest.mark.asyncio
async def test_delete_is_unconditional(session):
    service = MedicalRecordService(session)
    created = await service.create(uuid.uuid4(), note(date(2024, 3, 10)))

    assert await service.delete(created.id) is True
    assert await service.delete(created.id) is False


@pytest.mark.asyncio
async def test_deleting_resident_orphans_records_by_default(session, resident_form):
    residents = ResidentService(session)
    records = MedicalRecordService(session)
    resident = await residents.create(ResidentCreate(**resident_form()))
    await records.create(resident.id, note(date(2024, 3, 10)))

    await residents.delete(resident.id)

    assert await ResidentRepository(session).get(resident.id) is None
    orphans = await records.get_by_resident_id(resident.id)
    assert len(orphans) == 1


@pytest.mark.asyncio
async def test_deleting_resident_with_records(session, resident_form):
    residents = ResidentService(session)
    records = MedicalRecordService(session)
    resident = await residents.create(ResidentCreate(**resident_form()))
    await records.create(resident.id, note(date(2024, 3, 10)))
    await records.create(resident.id, note(date(2024, 3, 11)))

    await residents.delete(resident.id, with_records=True)

    assert await records.get_by_resident_id(resident.id) == []
    assert await MedicalRecordRepository(session).delete_for_resident(resident.id) == 0


def test_blank_record_text_is_rejected():
    with pytest.raises(ValueError):
        MedicalRecordCreate(date=date(2024, 3, 10), record="   ")


@pytest.mark.asyncio
async def test_failed_writes_are_logged_and_rolled_back(session, monkeypatch, caplog):
    service = MedicalRecordService(session)
    record_id = (await service.create(uuid.uuid4(), note(date(2024, 3, 10)))).id

    async def commit_fails():
        raise OperationalError("COMMIT", {}, Exception("connection reset"))

    monkeypatch.setattr(session, "commit", commit_fails)
    with caplog.at_level(logging.ERROR, logger="app.modules.medical_records.service"):
        with pytest.raises(OperationalError):
            await service.update(record_id, MedicalRecordUpdate(record="転倒リスクあり。"))
        with pytest.raises(OperationalError):
            await service.delete(record_id)
    monkeypatch.undo()

    errors = [r.getMessage() for r in caplog.records if r.name == "app.modules.medical_records.service" and r.levelno >= logging.ERROR]
    assert errors == [f"Failed to update medical record {record_id}", f"Failed to delete medical record {record_id}"]
    stored = await MedicalRecordRepository(session).get(record_id)
    assert stored.record == "食事摂取良好。"

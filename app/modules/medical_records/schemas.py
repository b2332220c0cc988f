import uuid
import datetime as dt
from typing import Annotated
from pydantic import AfterValidator, BaseModel, Field

def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("record must not be blank")
    return v

RecordText = Annotated[str, Field(min_length=1), AfterValidator(_not_blank)]

class MedicalRecordCreate(BaseModel):
    date: dt.date
    record: RecordText

class MedicalRecordUpdate(BaseModel):
    date: dt.date | None = None
    record: RecordText | None = None

class MedicalRecordOut(BaseModel):
    id: uuid.UUID
    resident_id: uuid.UUID
    date: dt.date
    record: str
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True

import uuid
from datetime import date, datetime
from typing import Annotated, Literal
from pydantic import AfterValidator, BaseModel, Field, model_validator

def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v

def _dedupe_medications(v: list[str]) -> list[str]:
    # first occurrence wins, blanks dropped
    seen: list[str] = []
    for item in v:
        name = item.strip()
        if name and name not in seen:
            seen.append(name)
    return seen

Gender = Literal["男性", "女性"]
PersonName = Annotated[str, Field(min_length=1, max_length=200), AfterValidator(_not_blank)]
RoomNumber = Annotated[str, Field(pattern=r"^[0-9]+$", max_length=16)]
CareLevel = Annotated[int, Field(ge=1, le=5)]
Medications = Annotated[list[str], AfterValidator(_dedupe_medications)]

class ResidentCreate(BaseModel):
    name: PersonName
    furigana: PersonName
    gender: Gender
    birth_date: date
    room_number: RoomNumber
    admission_date: date
    discharge_date: date | None = None
    medical_history: str = ""
    medications: Medications = []
    care_level: CareLevel | None = None

    @model_validator(mode="after")
    def _discharge_after_admission(self):
        if self.discharge_date and self.discharge_date < self.admission_date:
            raise ValueError("discharge_date must not be before admission_date")
        return self

class ResidentUpdate(BaseModel):
    name: PersonName | None = None
    furigana: PersonName | None = None
    gender: Gender | None = None
    birth_date: date | None = None
    room_number: RoomNumber | None = None
    admission_date: date | None = None
    discharge_date: date | None = None
    medical_history: str | None = None
    medications: Medications | None = None
    care_level: CareLevel | None = None

    @model_validator(mode="after")
    def _discharge_after_admission(self):
        if self.discharge_date and self.admission_date and self.discharge_date < self.admission_date:
            raise ValueError("discharge_date must not be before admission_date")
        return self

class ResidentOut(BaseModel):
    id: uuid.UUID
    name: str
    furigana: str
    last_name: str
    first_name: str
    last_name_kana: str
    first_name_kana: str
    gender: str
    birth_date: date
    room_number: str
    admission_date: date
    discharge_date: date | None
    medical_history: str
    medications: list[str]
    care_level: int | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

import uuid
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Date, ForeignKey, Integer
from app.core.base import Base, TimestampedMixin, CodePointString

class Resident(Base, TimestampedMixin):
    __tablename__ = "residents"

    # full fields as entered, plus last/first split kept in sync on writes
    name: Mapped[str] = mapped_column(CodePointString, index=True)
    furigana: Mapped[str] = mapped_column(CodePointString, index=True)  # katakana
    last_name: Mapped[str] = mapped_column(CodePointString, default="", index=True)
    first_name: Mapped[str] = mapped_column(CodePointString, default="", index=True)
    last_name_kana: Mapped[str] = mapped_column(CodePointString, default="", index=True)
    first_name_kana: Mapped[str] = mapped_column(CodePointString, default="", index=True)

    gender: Mapped[str] = mapped_column(String(8))  # 男性 | 女性
    birth_date: Mapped[date] = mapped_column(Date)
    room_number: Mapped[str] = mapped_column(String(16), index=True)
    admission_date: Mapped[date] = mapped_column(Date)
    discharge_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    medical_history: Mapped[str] = mapped_column(Text, default="")
    care_level: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)  # 1..5, null = not assessed

    medication_rows: Mapped[list["ResidentMedication"]] = relationship(
        lazy="selectin", cascade="all, delete-orphan", order_by="ResidentMedication.position"
    )

    @property
    def medications(self) -> list[str]:
        return [m.name for m in self.medication_rows]

class ResidentMedication(Base):
    __tablename__ = "resident_medications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resident_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("residents.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

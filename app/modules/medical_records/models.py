import uuid
import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, Date, UniqueConstraint
from app.core.base import Base, TimestampedMixin

class MedicalRecord(Base, TimestampedMixin):
    __tablename__ = "medical_records"
    # one note per resident per calendar day; the write itself is the arbiter
    __table_args__ = (UniqueConstraint("resident_id", "date", name="uq_medical_record_resident_date"),)

    # no FK: a record may outlive its resident
    resident_id: Mapped[uuid.UUID] = mapped_column(index=True)
    date: Mapped[dt.date] = mapped_column(Date)
    record: Mapped[str] = mapped_column(Text)

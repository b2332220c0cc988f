import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import TIMESTAMP, String

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

# Code-point ordering for text that is sorted or prefix-matched.
# SQLite's default BINARY collation already compares UTF-8 bytes, which is code-point order.
CodePointString = String(200).with_variant(String(200, collation="C"), "postgresql")

class Base(DeclarativeBase):
    pass

class TimestampedMixin:
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utcnow)

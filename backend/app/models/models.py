"""
SQLAlchemy models.

One table: summary_jobs. Each row is one submitted video link and tracks
it through validation, summarization, and (on demand) PDF generation.
Jobs submitted together share a batch_id.

Status progression:
    pending → processing → success
                         ↘ error   (invalid link, AI failure, or cancelled)
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

JOB_PENDING = "pending"
JOB_PROCESSING = "processing"
JOB_SUCCESS = "success"
JOB_ERROR = "error"

SUMMARY_LENGTHS = ("short", "medium", "comprehensive")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SummaryJob(Base):
    __tablename__ = "summary_jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)  # order within the batch
    url: Mapped[str] = mapped_column(String(2048))
    title: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    summary_length: Mapped[str] = mapped_column(String(32), default="medium")
    status: Mapped[str] = mapped_column(String(32), default=JOB_PENDING, index=True)
    summary_markdown: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

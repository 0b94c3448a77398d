"""
Pydantic schemas for the Summaries API.

These are SEPARATE from the SQLAlchemy model on purpose.
Model = database shape. Schemas = API shape.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

SummaryLength = Literal["short", "medium", "comprehensive"]


# --- Request Schemas ---

class BatchCreateRequest(BaseModel):
    """A batch of video links to summarize. Blank entries are ignored."""
    urls: list[str] = Field(..., description="YouTube links, one per entry")
    summary_length: SummaryLength = "medium"


# --- Response Schemas ---

class SummaryJobResponse(BaseModel):
    """One video link and where it is in the pipeline."""
    id: UUID
    batch_id: UUID
    position: int
    url: str
    title: Optional[str] = None
    summary_length: str
    status: str
    summary_markdown: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BatchResponse(BaseModel):
    """All jobs of one submission, with overall progress."""
    batch_id: UUID
    jobs: list[SummaryJobResponse]
    total: int
    processed: int   # jobs that reached success or error
    progress: float  # percentage, 0-100

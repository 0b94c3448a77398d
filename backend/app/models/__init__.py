from app.models.models import (
    JOB_ERROR,
    JOB_PENDING,
    JOB_PROCESSING,
    JOB_SUCCESS,
    SUMMARY_LENGTHS,
    Base,
    SummaryJob,
)

__all__ = [
    "Base",
    "SummaryJob",
    "JOB_PENDING",
    "JOB_PROCESSING",
    "JOB_SUCCESS",
    "JOB_ERROR",
    "SUMMARY_LENGTHS",
]

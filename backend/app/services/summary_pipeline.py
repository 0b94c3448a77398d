"""
Summary pipeline orchestrator.

Runs a submitted batch of video links through:
1. Validation — every link checked concurrently (noembed lookups are fast)
2. Summarization — one video at a time (Claude calls are slow and costly)

Status progression per job: pending → processing → success / error

Cancellation: the cancel endpoint flips pending/processing jobs to "error"
from another request. The pipeline re-reads each job before starting it
and again after Claude answers, and quietly drops results for jobs that
were cancelled in the meantime.

Runs as a background task with its own database session.
"""

import asyncio
import traceback
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import AsyncSessionLocal
from app.models import JOB_ERROR, JOB_PENDING, JOB_PROCESSING, JOB_SUCCESS, SummaryJob
from app.services.summarizer import SummaryError, SummaryService
from app.services.video_validation import VideoValidator

CANCELLED_MESSAGE = "Analysis cancelled by user."


async def run_batch_pipeline(batch_id: UUID) -> None:
    """Validate and summarize every pending job in a batch.

    This is the main entry point, called from a background task.

    Args:
        batch_id: UUID shared by the jobs of one submission.
    """
    async with AsyncSessionLocal() as db:
        try:
            result = await db.execute(
                select(SummaryJob)
                .where(SummaryJob.batch_id == batch_id, SummaryJob.status == JOB_PENDING)
                .order_by(SummaryJob.position)
            )
            jobs = list(result.scalars().all())
            if not jobs:
                print(f"⚠️ Batch {batch_id} has no pending jobs")
                return

            # --- Stage 1: Validate all links concurrently ---
            print(f"🔍 Validating {len(jobs)} links for batch {batch_id}...")
            validator = VideoValidator()
            results = await asyncio.gather(*(validator.validate(job.url) for job in jobs))

            for job, validation in zip(jobs, results):
                # The batch may have been cancelled while links were checked
                await db.refresh(job)
                if job.status != JOB_PENDING:
                    continue
                if validation.is_valid:
                    job.title = validation.title
                else:
                    job.status = JOB_ERROR
                    job.error = validation.error
            await db.commit()

            # --- Stage 2: Summarize one at a time ---
            service = SummaryService()
            for job in jobs:
                if job.status == JOB_PENDING:
                    await _summarize_job(db, job, service)

            print(f"🎉 Batch {batch_id} pipeline complete")

        except Exception as e:
            print(f"❌ Batch pipeline error: {str(e)}")
            traceback.print_exc()


async def run_job_pipeline(job_id: UUID) -> None:
    """Validate and summarize a single job (used for retries)."""
    async with AsyncSessionLocal() as db:
        try:
            result = await db.execute(select(SummaryJob).where(SummaryJob.id == job_id))
            job = result.scalar_one_or_none()
            if not job or job.status != JOB_PENDING:
                print(f"⚠️ Job {job_id} is not pending, nothing to retry")
                return

            validation = await VideoValidator().validate(job.url)
            await db.refresh(job)
            if job.status != JOB_PENDING:
                print(f"🛑 Job {job_id} was cancelled during validation")
                return
            if not validation.is_valid:
                await _fail_job(db, job, validation.error or "Invalid video link.")
                return

            job.title = validation.title
            await db.commit()

            await _summarize_job(db, job, SummaryService())

        except Exception as e:
            print(f"❌ Job pipeline error: {str(e)}")
            traceback.print_exc()


async def _summarize_job(db: AsyncSession, job: SummaryJob, service: SummaryService) -> bool:
    """Run the summarization stage for one job.

    The Anthropic SDK is synchronous, so the call runs in a thread pool
    to keep the event loop free for status polling.

    Returns:
        True if the summary was stored, False otherwise.
    """
    # Pick up a cancellation made by another request
    await db.refresh(job)
    if job.status != JOB_PENDING:
        return False

    job.status = JOB_PROCESSING
    await db.commit()
    print(f"📝 Summarizing {job.url}...")

    try:
        summary = await asyncio.to_thread(
            service.summarize, job.url, job.title or job.url, job.summary_length,
        )
    except SummaryError as e:
        await _fail_job(db, job, str(e))
        return False
    except Exception as e:
        traceback.print_exc()
        await _fail_job(db, job, f"Failed to analyze video. Details: {str(e)}")
        return False

    await db.refresh(job)
    if job.status != JOB_PROCESSING:
        print(f"🛑 Job {job.id} was cancelled, discarding summary")
        return False

    job.summary_markdown = summary
    job.status = JOB_SUCCESS
    job.error = None
    await db.commit()
    print(f"✅ Summary ready for {job.title or job.url}")
    return True


async def _fail_job(db: AsyncSession, job: SummaryJob, error_message: str) -> None:
    """Mark a job as failed with a user-facing error message."""
    job.status = JOB_ERROR
    job.error = error_message
    await db.commit()
    print(f"❌ Job {job.id} marked as failed: {error_message}")

"""
Summary API endpoints.

These handle the batch summarization lifecycle:
1. POST /summaries/batches — Submit video links (starts the pipeline)
2. GET /summaries/batches/{id} — Poll progress of every link in the batch
3. POST /summaries/batches/{id}/cancel — Stop whatever hasn't finished
4. DELETE /summaries/batches/{id} — Clear the batch
5. GET /summaries/{job_id} — One link's status and summary
6. POST /summaries/{job_id}/retry — Re-run a failed link
7. GET /summaries/{job_id}/pdf — Download the summary as a PDF

Processing runs in the background. The client POSTs the batch, gets the
batch id immediately, then polls until every job is success or error.
"""

import asyncio
from urllib.parse import quote
from uuid import UUID, uuid4

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from reportlab.lib.pagesizes import A4, letter
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models import JOB_ERROR, JOB_PENDING, JOB_PROCESSING, JOB_SUCCESS, SummaryJob
from app.schemas.summaries import BatchCreateRequest, BatchResponse, SummaryJobResponse
from app.services.document import ArtifactFinalizationError
from app.services.fonts import FontAssets
from app.services.pdf_summary import PDF_MEDIA_TYPE, LayoutOptions, generate_document
from app.services.summary_pipeline import CANCELLED_MESSAGE, run_batch_pipeline, run_job_pipeline
from app.services.video_validation import is_valid_youtube_url

router = APIRouter(prefix="/api/v1/summaries", tags=["summaries"])

PAGE_SIZES = {"a4": A4, "letter": letter}


@router.post("/batches", response_model=BatchResponse, status_code=201)
async def create_batch(
    request: BatchCreateRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Submit a batch of video links for summarization.

    Every link must look like a YouTube URL; otherwise nothing is queued
    and the offending links are listed in the error.
    """
    urls = [url.strip() for url in request.urls if url.strip()]
    if not urls:
        raise HTTPException(status_code=400, detail="Please enter at least one video link.")

    invalid = [url for url in urls if not is_valid_youtube_url(url)]
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid YouTube URL format: {', '.join(invalid)}",
        )

    batch_id = uuid4()
    jobs = [
        SummaryJob(
            batch_id=batch_id,
            position=position,
            url=url,
            summary_length=request.summary_length,
            status=JOB_PENDING,
        )
        for position, url in enumerate(urls)
    ]
    db.add_all(jobs)
    await db.commit()

    # Kick off the pipeline in the background — this returns immediately
    background_tasks.add_task(run_batch_pipeline, batch_id)

    return _batch_response(batch_id, jobs)


@router.get("/batches/{batch_id}", response_model=BatchResponse)
async def get_batch(batch_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get every job in a batch plus overall progress."""
    jobs = await _get_batch_jobs(db, batch_id)
    return _batch_response(batch_id, jobs)


@router.post("/batches/{batch_id}/cancel", response_model=BatchResponse)
async def cancel_batch(batch_id: UUID, db: AsyncSession = Depends(get_db)):
    """Stop a running batch.

    Jobs that haven't finished are marked as failed with a cancellation
    message. Finished summaries are kept. A summary already being generated
    is discarded when it arrives.
    """
    jobs = await _get_batch_jobs(db, batch_id)
    for job in jobs:
        if job.status in (JOB_PENDING, JOB_PROCESSING):
            job.status = JOB_ERROR
            job.error = CANCELLED_MESSAGE
    await db.commit()

    return _batch_response(batch_id, jobs)


@router.delete("/batches/{batch_id}", status_code=204)
async def delete_batch(batch_id: UUID, db: AsyncSession = Depends(get_db)):
    """Clear all jobs of a batch."""
    await _get_batch_jobs(db, batch_id)
    await db.execute(delete(SummaryJob).where(SummaryJob.batch_id == batch_id))
    await db.commit()
    return Response(status_code=204)


@router.get("/{job_id}", response_model=SummaryJobResponse)
async def get_job(job_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get one job's status, title, and summary."""
    job = await _get_job(db, job_id)
    return SummaryJobResponse.model_validate(job)


@router.post("/{job_id}/retry", response_model=SummaryJobResponse)
async def retry_job(
    job_id: UUID,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Re-run a failed job (bad validation, AI error, or cancelled)."""
    job = await _get_job(db, job_id)
    if job.status != JOB_ERROR:
        raise HTTPException(
            status_code=409,
            detail=f"Only failed summaries can be retried. Current status: {job.status}",
        )

    job.status = JOB_PENDING
    job.error = None
    await db.commit()
    await db.refresh(job)

    background_tasks.add_task(run_job_pipeline, job.id)

    return SummaryJobResponse.model_validate(job)


@router.get("/{job_id}/pdf")
async def download_summary_pdf(job_id: UUID, db: AsyncSession = Depends(get_db)):
    """Download a finished summary as a PDF.

    Generated on the fly from the stored markdown — layout takes a few
    milliseconds, so there's nothing to gain from storing PDFs. The work
    runs in a thread so concurrent downloads don't block the event loop.
    """
    job = await _get_job(db, job_id)
    if job.status != JOB_SUCCESS:
        raise HTTPException(
            status_code=400,
            detail=f"Summary not ready. Current status: {job.status}",
        )

    try:
        artifact = await asyncio.to_thread(
            generate_document,
            job.title or job.url,
            job.summary_markdown or "",
            _layout_options(),
        )
    except ArtifactFinalizationError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    return Response(
        content=artifact.content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(artifact.filename)},
    )


# --- Helper functions ---

async def _get_job(db: AsyncSession, job_id: UUID) -> SummaryJob:
    result = await db.execute(select(SummaryJob).where(SummaryJob.id == job_id))
    job = result.scalar_one_or_none()
    if not job:
        raise HTTPException(status_code=404, detail="Summary not found")
    return job


async def _get_batch_jobs(db: AsyncSession, batch_id: UUID) -> list[SummaryJob]:
    """Load a batch's jobs in submission order. Raises 404 if empty."""
    result = await db.execute(
        select(SummaryJob)
        .where(SummaryJob.batch_id == batch_id)
        .order_by(SummaryJob.position)
    )
    jobs = list(result.scalars().all())
    if not jobs:
        raise HTTPException(status_code=404, detail="Batch not found")
    return jobs


def _batch_response(batch_id: UUID, jobs: list[SummaryJob]) -> BatchResponse:
    total = len(jobs)
    processed = sum(1 for job in jobs if job.status in (JOB_SUCCESS, JOB_ERROR))
    return BatchResponse(
        batch_id=batch_id,
        jobs=[SummaryJobResponse.model_validate(job) for job in jobs],
        total=total,
        processed=processed,
        progress=(processed / total * 100) if total else 0.0,
    )


def _layout_options() -> LayoutOptions:
    """Build PDF layout options from settings."""
    font_assets = None
    if settings.has_custom_fonts:
        font_assets = FontAssets(
            regular=settings.PDF_FONT_REGULAR,
            bold=settings.PDF_FONT_BOLD,
            italic=settings.PDF_FONT_ITALIC,
        )

    return LayoutOptions(
        page_size=PAGE_SIZES.get(settings.PDF_PAGE_SIZE.lower(), A4),
        margin_pt=settings.PDF_MARGIN_PT,
        font_family=settings.PDF_FONT_FAMILY,
        font_assets=font_assets,
    )


def _content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII video titles."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").strip() or "summary.pdf"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"

"""
Submission API Routes for Form Architect.

Listing, detail, manual spam flag and summary statistics. Spam verdicts
are recomputed against the current threshold on every read.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database.session import get_db
from database.repositories import SubmissionRepository
from submission_quality.scoring_model import score_category, score_color
from submission_quality.spam_detector import is_spam
from ..services import get_services

logger = logging.getLogger(__name__)

router = APIRouter()


class SpamStatus(str, Enum):
    ALL = "all"
    SPAM = "spam"
    NOT_SPAM = "not_spam"
    SUSPICIOUS = "suspicious"


class ScoreRange(str, Enum):
    ALL = "all"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SortField(str, Enum):
    SUBMITTED_AT = "submitted_at"
    LEAD_SCORE = "lead_score"
    SPAM_SCORE = "spam_score"


class SpamFlag(BaseModel):
    """Manual spam flag update."""
    marked_spam: bool


def submission_to_dict(submission, threshold: int) -> Dict[str, Any]:
    return {
        "id": submission.id,
        "form_id": submission.form_id,
        "data": submission.data_json or {},
        "lead_score": submission.lead_score,
        "lead_category": score_category(submission.lead_score),
        "lead_color": score_color(submission.lead_score),
        "spam_score": submission.spam_score,
        "is_spam": is_spam(submission.spam_score, threshold) or bool(submission.marked_spam),
        "marked_spam": bool(submission.marked_spam),
        "ip_address": submission.ip_address,
        "user_agent": submission.user_agent,
        "auto_response_sent": bool(submission.auto_response_sent),
        "submitted_at": submission.submitted_at.isoformat() if submission.submitted_at else None,
    }


@router.get("/submissions")
async def list_submissions(
    spam_status: SpamStatus = SpamStatus.ALL,
    score_range: ScoreRange = ScoreRange.ALL,
    form_id: Optional[int] = None,
    order_by: SortField = SortField.SUBMITTED_AT,
    descending: bool = True,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List submissions with spam and score filters."""
    threshold = get_services().spam_threshold
    items, total = await SubmissionRepository(db).list_filtered(
        spam_status=spam_status.value,
        score_range=score_range.value,
        threshold=threshold,
        form_id=form_id,
        order_by=order_by.value,
        descending=descending,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return {
        "items": [submission_to_dict(s, threshold) for s in items],
        "total": total,
        "page": page,
        "page_size": page_size,
        "pages": (total + page_size - 1) // page_size,
    }


@router.get("/submissions/stats/summary")
async def submission_stats(
    form_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """Totals, spam counts and lead quality mix."""
    threshold = get_services().spam_threshold
    repo = SubmissionRepository(db)

    return {
        "total": await repo.count(form_id=form_id),
        "spam": await repo.count(spam_status="spam", threshold=threshold, form_id=form_id),
        "suspicious": await repo.count(spam_status="suspicious", threshold=threshold, form_id=form_id),
        "high_quality": await repo.count(score_range="high", form_id=form_id),
        "medium_quality": await repo.count(score_range="medium", form_id=form_id),
        "low_quality": await repo.count(score_range="low", form_id=form_id),
        "average_lead_score": await repo.average_lead_score(form_id),
        "spam_threshold": threshold,
    }


@router.get("/submissions/{submission_id}")
async def get_submission(submission_id: int, db: AsyncSession = Depends(get_db)):
    """Get a submission by ID."""
    submission = await SubmissionRepository(db).get_by_id(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission_to_dict(submission, get_services().spam_threshold)


@router.post("/submissions/{submission_id}/spam")
async def flag_submission(
    submission_id: int,
    request: SpamFlag,
    db: AsyncSession = Depends(get_db),
):
    """Set or clear the manual spam flag."""
    submission = await SubmissionRepository(db).set_marked_spam(submission_id, request.marked_spam)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    await db.commit()

    logger.info(f"Submission {submission_id} marked_spam={request.marked_spam}")
    return submission_to_dict(submission, get_services().spam_threshold)

"""
Ad-hoc scoring API Route for Form Architect.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database.session import get_db
from database.repositories import SubmissionRepository
from submission_quality.behavior import StaticBehaviorContext
from ..services import get_services

logger = logging.getLogger(__name__)

router = APIRouter()


class ScoreRequest(BaseModel):
    """Submission to score without storing it."""
    data: Dict[str, Union[str, List[str]]]
    ip_address: Optional[str] = Field(None, max_length=45)


@router.post("/score")
async def score_submission(request: ScoreRequest, db: AsyncSession = Depends(get_db)):
    """
    Lead score and spam analysis for a submission, nothing is persisted.

    When ``ip_address`` is given, submissions already stored from that
    address in the last hour feed the behaviour factor.
    """
    services = get_services()
    ip_address = request.ip_address or None
    recent = await SubmissionRepository(db).count_recent_by_ip(ip_address) if ip_address else 0

    lead = services.lead_scorer.score(request.data)
    analysis = await asyncio.to_thread(
        services.spam_detector.analyze, request.data, StaticBehaviorContext(recent), ip_address,
    )
    logger.debug(f"Ad-hoc score for {ip_address or 'anonymous'}: {recent} recent submissions")

    return {
        "lead_score": lead.to_dict(),
        "spam": analysis.to_dict(),
    }

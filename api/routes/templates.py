"""
Template Library API Routes for Form Architect.

Browse built-in templates, install them as forms (optionally seeded with
sample submissions) and clean the sample data up again.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database.session import get_db
from database.repositories import FormRepository, SubmissionRepository
from submission_quality.sample_data import QualityTier
from submission_quality.templates import DATE_RANGES, SampleBatchOptions, TemplateNotFoundError
from ..services import get_services
from .forms import form_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()


class InstallRequest(BaseModel):
    """Template installation options."""
    generate_submissions: bool = True
    submissions_count: int = Field(20, ge=0, le=500)
    include_spam: bool = True
    spam_percentage: int = Field(10, ge=0, le=100)
    date_range: str = "last_30_days"
    score_distribution: Dict[str, int] = Field(default_factory=lambda: {
        "excellent": 25,
        "good": 40,
        "fair": 25,
        "poor": 10,
    })


def _get_template(template_id: str):
    try:
        return get_services().template_library.get(template_id)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail="Template not found")


@router.get("/templates")
async def list_templates():
    """Templates grouped by category."""
    library = get_services().template_library
    return {
        "categories": {
            category_id: {
                "name": category["name"],
                "description": category["description"],
                "templates": [t.to_dict() for t in category["templates"]],
            }
            for category_id, category in library.all_by_category().items()
        },
        "recommended": [t.id for t in library.recommended()],
        "count": library.count(),
    }


@router.get("/templates/{template_id}")
async def get_template(template_id: str):
    return _get_template(template_id).to_dict()


@router.post("/templates/{template_id}/install", status_code=201)
async def install_template(
    template_id: str,
    request: InstallRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a form from a template, optionally with sample submissions."""
    template = _get_template(template_id)
    if request.date_range not in DATE_RANGES:
        raise HTTPException(status_code=422, detail=f"Unknown date range: {request.date_range}")
    unknown_tiers = set(request.score_distribution) - {t.value for t in QualityTier}
    if unknown_tiers:
        raise HTTPException(status_code=422, detail=f"Unknown quality tiers: {sorted(unknown_tiers)}")

    form = await FormRepository(db).create(
        name=template.name,
        fields=[f.to_dict() for f in template.fields],
        settings_json={
            "created_from_template": template.id,
            "template_category": template.category,
        },
        template_id=template.id,
    )

    created = 0
    if request.generate_submissions and request.submissions_count:
        options = SampleBatchOptions(
            count=request.submissions_count,
            include_spam=request.include_spam,
            spam_percentage=request.spam_percentage,
            date_range=request.date_range,
            score_distribution=request.score_distribution,
        )
        samples = get_services().batch_builder.build(template, options)
        created = await SubmissionRepository(db).create_many(form.id, [
            {
                "data": s.data,
                "lead_score": s.lead_score,
                "spam_score": s.spam_score,
                "ip_address": s.ip_address,
                "user_agent": s.user_agent,
                "submitted_at": s.submitted_at,
            }
            for s in samples
        ])

    await db.commit()
    logger.info(f"Installed template '{template.id}' as form {form.id} with {created} samples")

    return {"form": form_to_dict(form), "submissions_created": created}


@router.get("/samples/stats")
async def sample_stats(db: AsyncSession = Depends(get_db)):
    return await SubmissionRepository(db).sample_data_stats()


@router.delete("/samples")
async def delete_samples(db: AsyncSession = Depends(get_db)):
    """Delete every form installed from a template and its submissions."""
    result = await SubmissionRepository(db).delete_sample_data()
    await db.commit()
    return result

"""
Form API Routes for Form Architect.

Form creation, AI form generation and the public submission endpoint.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database.session import get_db
from database.repositories import FormRepository, SubmissionRepository
from llm.form_generator import COMPLEXITY_LEVELS, FormGenerationError
from submission_quality.behavior import StaticBehaviorContext
from submission_quality.sample_data import FieldDescriptor
from ..services import get_services

logger = logging.getLogger(__name__)

router = APIRouter()


class FieldSchema(BaseModel):
    """Form field definition."""
    name: str = Field(..., min_length=1)
    type: str = "text"
    required: bool = False
    options: List[str] = []
    label: Optional[str] = None


class FormCreate(BaseModel):
    """Form creation request."""
    name: str = Field(..., min_length=1, max_length=255)
    fields: List[FieldSchema] = Field(..., min_length=1)
    settings: Dict[str, Any] = {}


class GenerateFormRequest(BaseModel):
    """AI form generation request."""
    description: str = Field(..., max_length=2000)
    complexity: str = "intermediate"
    purpose: str = Field("", max_length=255)
    audience: str = Field("", max_length=255)
    save: bool = False


class SubmissionCreate(BaseModel):
    """Submission request."""
    data: Dict[str, Union[str, List[str]]]


def form_to_dict(form) -> Dict[str, Any]:
    return {
        "id": form.id,
        "name": form.name,
        "fields": form.fields_json or [],
        "settings": form.settings_json or {},
        "template_id": form.template_id,
        "created_at": form.created_at.isoformat() if form.created_at else None,
    }


def missing_required(fields: List[Dict[str, Any]], data: Dict[str, Any]) -> List[str]:
    """Names of required fields that are absent or empty."""
    missing = []
    for field in fields:
        descriptor = FieldDescriptor.from_dict(field)
        if not descriptor.required:
            continue
        value = data.get(descriptor.name)
        if value is None or (isinstance(value, str) and not value.strip()) or value == []:
            missing.append(descriptor.name)
    return missing


def client_ip(request: Request) -> Optional[str]:
    """Submitter IP: Client-IP header, then the first X-Forwarded-For hop, then the peer."""
    forwarded = request.headers.get("client-ip") or request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45] or None
    return request.client.host if request.client else None


@router.post("/forms", status_code=201)
async def create_form(request: FormCreate, db: AsyncSession = Depends(get_db)):
    """Create a form."""
    form = await FormRepository(db).create(
        name=request.name,
        fields=[f.model_dump(exclude_none=True) for f in request.fields],
        settings_json=request.settings,
    )
    await db.commit()
    logger.info(f"Form created: {form.id}")
    return form_to_dict(form)


GENERATION_ERROR_STATUS = {
    "invalid_description": 422,
    "rate_limit_exceeded": 429,
    "missing_api_key": 503,
    "api_request_failed": 502,
    "invalid_json": 502,
    "invalid_structure": 502,
    "no_fields": 502,
}


@router.post("/forms/generate")
async def generate_form(request: GenerateFormRequest, db: AsyncSession = Depends(get_db)):
    """
    Generate a form definition from a plain-language description.

    With ``save`` the generated form is stored and returned with its ID.
    """
    if request.complexity not in COMPLEXITY_LEVELS:
        raise HTTPException(status_code=422, detail=f"Unknown complexity: {request.complexity}")

    try:
        generated = await asyncio.to_thread(
            get_services().form_generator.generate,
            request.description,
            request.complexity,
            request.purpose,
            request.audience,
        )
    except FormGenerationError as e:
        raise HTTPException(
            status_code=GENERATION_ERROR_STATUS.get(e.code, 502),
            detail={"code": e.code, "message": e.message},
        )

    if not request.save:
        return {"form": generated.to_dict(), "saved": False}

    form = await FormRepository(db).create(
        name=generated.name,
        fields=[f.to_dict() for f in generated.fields],
        settings_json={**generated.settings, "description": generated.description},
    )
    await db.commit()
    logger.info(f"Generated form saved: {form.id}")
    return {"form": form_to_dict(form), "saved": True}


@router.get("/forms/{form_id}")
async def get_form(form_id: int, db: AsyncSession = Depends(get_db)):
    """Get a form by ID."""
    form = await FormRepository(db).get_by_id(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form_to_dict(form)


@router.post("/forms/{form_id}/submissions", status_code=201)
async def submit_form(
    form_id: int,
    request: SubmissionCreate,
    http_request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Accept a submission: validate, score, detect spam, store and
    send the auto-response for non-spam submissions.
    """
    services = get_services()
    form = await FormRepository(db).get_by_id(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")

    data = request.data
    missing = missing_required(form.fields_json or [], data)
    if missing:
        raise HTTPException(
            status_code=422,
            detail={"message": "Required fields missing", "fields": missing},
        )

    submissions = SubmissionRepository(db)
    ip_address = client_ip(http_request)

    # Stored first so the recent-submission count includes this one
    submission = await submissions.create(
        form_id,
        data,
        ip_address=ip_address,
        user_agent=http_request.headers.get("user-agent"),
    )
    recent = await submissions.count_recent_by_ip(ip_address) if ip_address else 0

    lead = services.lead_scorer.score(data)
    analysis = await asyncio.to_thread(
        services.spam_detector.analyze, data, StaticBehaviorContext(recent), ip_address,
    )

    await submissions.set_scores(submission.id, lead.score, analysis.spam_score)
    await db.commit()

    auto_response = None
    if not analysis.is_spam:
        auto_response = await services.auto_responder.respond(data, lead.score)
        if auto_response.sent:
            await submissions.mark_auto_response_sent(submission.id)
            await db.commit()

    logger.info(
        f"Submission {submission.id} on form {form_id}: "
        f"lead {lead.score}, spam {analysis.spam_score}"
    )

    return {
        "id": submission.id,
        "form_id": form_id,
        "lead_score": lead.to_dict(),
        "spam": analysis.to_dict(),
        "auto_response": auto_response.to_dict() if auto_response else None,
    }

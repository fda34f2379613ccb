"""
Repository classes for Form Architect data access layer.

Each repository encapsulates CRUD operations for a specific model.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, delete, update, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Form, Submission

logger = logging.getLogger(__name__)

SPAM_STATUSES = ("all", "spam", "not_spam", "suspicious")
SCORE_RANGES = ("all", "high", "medium", "low")
ORDER_COLUMNS = {
    "submitted_at": Submission.submitted_at,
    "lead_score": Submission.lead_score,
    "spam_score": Submission.spam_score,
    "id": Submission.id,
}

# Lower bound of the "suspicious" band, which ends just below the threshold
SUSPICIOUS_FLOOR = 40


class FormRepository:
    """Data access for forms."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, fields: List[Dict[str, Any]], **kwargs) -> Form:
        form = Form(name=name, fields_json=fields, **kwargs)
        self.session.add(form)
        await self.session.flush()
        return form

    async def get_by_id(self, form_id: int) -> Optional[Form]:
        result = await self.session.execute(
            select(Form).where(Form.id == form_id)
        )
        return result.scalar_one_or_none()

    async def list_from_template(self) -> List[Form]:
        """Forms installed from a template, newest first."""
        result = await self.session.execute(
            select(Form)
            .where(Form.template_id.is_not(None))
            .order_by(Form.created_at.desc(), Form.id.desc())
        )
        return list(result.scalars().all())


class SubmissionRepository:
    """Data access for submissions and their scores."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, form_id: int, data: Dict[str, Any], **kwargs) -> Submission:
        submission = Submission(form_id=form_id, data_json=data, **kwargs)
        self.session.add(submission)
        await self.session.flush()
        return submission

    async def create_many(self, form_id: int, rows: List[Dict[str, Any]]) -> int:
        """Insert several submissions; each row holds ``data`` plus column values."""
        for row in rows:
            row = dict(row)
            self.session.add(Submission(form_id=form_id, data_json=row.pop("data"), **row))
        await self.session.flush()
        return len(rows)

    async def get_by_id(self, submission_id: int) -> Optional[Submission]:
        result = await self.session.execute(
            select(Submission).where(Submission.id == submission_id)
        )
        return result.scalar_one_or_none()

    async def count_recent_by_ip(
        self,
        ip_address: str,
        window: timedelta = timedelta(hours=1),
        now: Optional[datetime] = None,
    ) -> int:
        """Submissions from ``ip_address`` within ``window`` of ``now``."""
        since = (now or datetime.utcnow()) - window
        result = await self.session.execute(
            select(func.count(Submission.id))
            .where(Submission.ip_address == ip_address)
            .where(Submission.submitted_at >= since)
        )
        return result.scalar() or 0

    def _filters(
        self,
        spam_status: str,
        score_range: str,
        threshold: int,
        form_id: Optional[int],
    ) -> List[Any]:
        if spam_status not in SPAM_STATUSES:
            raise ValueError(f"Unknown spam status: {spam_status}")
        if score_range not in SCORE_RANGES:
            raise ValueError(f"Unknown score range: {score_range}")

        clauses = []
        flagged = Submission.marked_spam.is_(True)

        if spam_status == "spam":
            clauses.append(or_(Submission.spam_score >= threshold, flagged))
        elif spam_status == "not_spam":
            clauses.append(and_(Submission.spam_score < threshold, ~flagged))
        elif spam_status == "suspicious":
            clauses.append(and_(
                Submission.spam_score >= SUSPICIOUS_FLOOR,
                Submission.spam_score < threshold,
                ~flagged,
            ))

        if score_range == "high":
            clauses.append(Submission.lead_score >= 80)
        elif score_range == "medium":
            clauses.append(and_(Submission.lead_score >= 50, Submission.lead_score < 80))
        elif score_range == "low":
            clauses.append(Submission.lead_score < 50)

        if form_id is not None:
            clauses.append(Submission.form_id == form_id)
        return clauses

    async def list_filtered(
        self,
        spam_status: str = "all",
        score_range: str = "all",
        threshold: int = 60,
        form_id: Optional[int] = None,
        order_by: str = "submitted_at",
        descending: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Submission], int]:
        """
        Filtered page of submissions.

        Args:
            spam_status: all, spam, not_spam or suspicious
            score_range: all, high (80+), medium (50-79) or low (<50)
            threshold: Current spam threshold
            form_id: Restrict to one form
            order_by: submitted_at, lead_score, spam_score or id
            descending: Sort direction
            limit: Page size
            offset: Rows to skip

        Returns:
            (submissions, total matching rows)
        """
        clauses = self._filters(spam_status, score_range, threshold, form_id)
        column = ORDER_COLUMNS.get(order_by, Submission.submitted_at)
        ordering = column.desc() if descending else column.asc()

        q = select(Submission).where(*clauses).order_by(ordering, Submission.id.desc())
        result = await self.session.execute(q.offset(offset).limit(limit))

        total = await self.session.execute(
            select(func.count(Submission.id)).where(*clauses)
        )
        return list(result.scalars().all()), total.scalar() or 0

    async def count(
        self,
        spam_status: str = "all",
        score_range: str = "all",
        threshold: int = 60,
        form_id: Optional[int] = None,
    ) -> int:
        clauses = self._filters(spam_status, score_range, threshold, form_id)
        result = await self.session.execute(
            select(func.count(Submission.id)).where(*clauses)
        )
        return result.scalar() or 0

    async def average_lead_score(self, form_id: Optional[int] = None) -> int:
        """Mean lead score rounded to an int, 0 when there are no submissions."""
        q = select(func.avg(Submission.lead_score))
        if form_id is not None:
            q = q.where(Submission.form_id == form_id)
        result = await self.session.execute(q)
        average = result.scalar()
        return int(round(average)) if average is not None else 0

    async def set_marked_spam(self, submission_id: int, marked: bool) -> Optional[Submission]:
        submission = await self.get_by_id(submission_id)
        if not submission:
            return None
        submission.marked_spam = marked
        await self.session.flush()
        return submission

    async def set_scores(self, submission_id: int, lead_score: int, spam_score: int) -> None:
        await self.session.execute(
            update(Submission)
            .where(Submission.id == submission_id)
            .values(lead_score=lead_score, spam_score=spam_score)
        )
        await self.session.flush()

    async def mark_auto_response_sent(self, submission_id: int) -> None:
        await self.session.execute(
            update(Submission)
            .where(Submission.id == submission_id)
            .values(auto_response_sent=True)
        )
        await self.session.flush()

    async def delete_sample_data(self) -> Dict[str, int]:
        """Delete forms installed from templates together with their submissions."""
        form_ids = [f.id for f in await FormRepository(self.session).list_from_template()]
        if not form_ids:
            return {"forms_deleted": 0, "submissions_deleted": 0}

        submissions_deleted = await self.session.execute(
            delete(Submission).where(Submission.form_id.in_(form_ids))
        )
        await self.session.execute(delete(Form).where(Form.id.in_(form_ids)))
        await self.session.flush()

        logger.info(f"Deleted sample data: {len(form_ids)} forms")
        return {
            "forms_deleted": len(form_ids),
            "submissions_deleted": submissions_deleted.rowcount or 0,
        }

    async def sample_data_stats(self) -> Dict[str, Any]:
        forms = await FormRepository(self.session).list_from_template()
        submissions_count = 0
        if forms:
            result = await self.session.execute(
                select(func.count(Submission.id))
                .where(Submission.form_id.in_([f.id for f in forms]))
            )
            submissions_count = result.scalar() or 0

        return {
            "forms_count": len(forms),
            "submissions_count": submissions_count,
            "last_installed": forms[0].created_at.isoformat() if forms else None,
            "has_sample_data": bool(forms),
        }

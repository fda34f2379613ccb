"""
Form template library and sample submission batches.

Built-in templates are grouped into categories. Installing a template
can seed the new form with a batch of scored sample submissions whose
quality follows a configurable distribution.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .sample_data import FieldDescriptor, FormTemplate, QualityTier, SampleDataGenerator
from .scoring_model import LeadScorer
from .spam_detector import SpamDetector

logger = logging.getLogger(__name__)


class TemplateNotFoundError(KeyError):
    """Raised for an unknown template id."""


def _fields(*definitions: Dict[str, Any]) -> List[FieldDescriptor]:
    return [FieldDescriptor.from_dict(d) for d in definitions]


BUILTIN_TEMPLATES = [
    FormTemplate(
        id="contact-form",
        name="Contact Form",
        category="business",
        description="General enquiry form with optional phone and company.",
        fields=_fields(
            {"name": "full_name", "type": "text", "required": True},
            {"name": "email", "type": "email", "required": True},
            {"name": "phone", "type": "tel"},
            {"name": "company", "type": "text"},
            {"name": "subject", "type": "text"},
            {"name": "message", "type": "textarea", "required": True},
            {"name": "preferred_contact", "type": "radio",
             "options": ["Email", "Phone", "Either", "No preference"]},
        ),
    ),
    FormTemplate(
        id="quote-request",
        name="Quote Request",
        category="business",
        description="Service quote request with budget and scope.",
        fields=_fields(
            {"name": "full_name", "type": "text", "required": True},
            {"name": "work_email", "type": "email", "required": True},
            {"name": "phone", "type": "tel"},
            {"name": "company", "type": "text"},
            {"name": "services", "type": "checkbox",
             "options": ["Web Design", "SEO", "Branding", "Hosting", "Maintenance"]},
            {"name": "budget", "type": "select",
             "options": ["$25k+", "$10k-$25k", "$5k-$10k", "Under $5k", "Not sure"]},
            {"name": "project_details", "type": "textarea", "required": True},
            {"name": "best_time", "type": "select",
             "options": ["Morning", "Afternoon", "Evening", "Flexible"]},
        ),
        sample_data_profiles={
            "excellent": {
                "work_email": ["{first}.{last}@{last}group.com", "{first}@{last}partners.com"],
            },
            "good": {
                "work_email": ["{first}.{last}@gmail.com", "{first}{rand}@outlook.com"],
            },
            "fair": {
                "work_email": ["{first}{rand}@yahoo.com"],
            },
            "poor": {
                "work_email": ["{first}@test.com"],
            },
        },
    ),
    FormTemplate(
        id="event-registration",
        name="Event Registration",
        category="events",
        description="Attendee registration with session selection.",
        fields=_fields(
            {"name": "first_name", "type": "text", "required": True},
            {"name": "last_name", "type": "text", "required": True},
            {"name": "email", "type": "email", "required": True},
            {"name": "organization", "type": "text"},
            {"name": "sessions", "type": "checkbox",
             "options": ["Keynote", "Workshop A", "Workshop B", "Networking", "Panel"]},
            {"name": "ticket_type", "type": "select",
             "options": ["VIP", "Standard", "Student", "Other"]},
            {"name": "comments", "type": "textarea"},
        ),
    ),
    FormTemplate(
        id="newsletter-signup",
        name="Newsletter Signup",
        category="marketing",
        description="Minimal email capture with topic interests.",
        fields=_fields(
            {"name": "email", "type": "email", "required": True},
            {"name": "name", "type": "text"},
            {"name": "interests", "type": "checkbox",
             "options": ["Product news", "Tutorials", "Case studies", "Events"]},
        ),
    ),
]

TEMPLATE_CATEGORIES = {
    "business": {"name": "Business", "description": "Lead capture and sales enquiries"},
    "events": {"name": "Events", "description": "Registrations and RSVPs"},
    "marketing": {"name": "Marketing", "description": "Audience growth"},
}

RECOMMENDED_TEMPLATES = ["contact-form", "quote-request"]


class TemplateLibrary:
    """Lookup over the available form templates."""

    def __init__(
        self,
        templates: Optional[List[FormTemplate]] = None,
        categories: Optional[Dict[str, Dict[str, str]]] = None,
        recommended: Optional[List[str]] = None,
    ):
        templates = BUILTIN_TEMPLATES if templates is None else templates
        self._templates = {t.id: t for t in templates}
        self._categories = TEMPLATE_CATEGORIES if categories is None else categories
        self._recommended = RECOMMENDED_TEMPLATES if recommended is None else recommended

    def get(self, template_id: str) -> FormTemplate:
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def all_by_category(self) -> Dict[str, Dict[str, Any]]:
        """Templates grouped under their category, empty categories omitted."""
        organized: Dict[str, Dict[str, Any]] = {}
        for category_id, category in self._categories.items():
            members = [t for t in self._templates.values() if t.category == category_id]
            if members:
                organized[category_id] = {**category, "templates": members}
        return organized

    def recommended(self) -> List[FormTemplate]:
        return [self._templates[t] for t in self._recommended if t in self._templates]

    def count(self) -> int:
        return len(self._templates)


DATE_RANGES = {
    "today": None,
    "last_7_days": timedelta(days=7),
    "last_30_days": timedelta(days=30),
    "last_60_days": timedelta(days=60),
    "last_90_days": timedelta(days=90),
}

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
]

# Spam score given to forced-spam samples the detector did not catch
FORCED_SPAM_SCORE_RANGE = (60, 95)


@dataclass
class SampleBatchOptions:
    """Options for generating a batch of sample submissions."""
    count: int = 20
    include_spam: bool = True
    spam_percentage: int = 10
    date_range: str = "last_30_days"
    score_distribution: Dict[str, int] = field(default_factory=lambda: {
        "excellent": 25,
        "good": 40,
        "fair": 25,
        "poor": 10,
    })


@dataclass
class SampleSubmission:
    """A generated, scored sample submission."""
    data: Dict[str, Any]
    quality_tier: QualityTier
    forced_spam: bool
    lead_score: int
    spam_score: int
    ip_address: str
    user_agent: str
    submitted_at: datetime


class SampleBatchBuilder:
    """Generates and scores batches of sample submissions."""

    def __init__(
        self,
        generator: Optional[SampleDataGenerator] = None,
        scorer: Optional[LeadScorer] = None,
        detector: Optional[SpamDetector] = None,
        rng: Optional[random.Random] = None,
        now=datetime.utcnow,
    ):
        self.rng = rng or random.Random()
        self.generator = generator or SampleDataGenerator(self.rng)
        self.scorer = scorer or LeadScorer()
        self.detector = detector or SpamDetector()
        self._now = now

    def build(
        self,
        template: FormTemplate,
        options: Optional[SampleBatchOptions] = None,
    ) -> List[SampleSubmission]:
        """
        Generate a batch of scored sample submissions.

        Args:
            template: Template to generate submissions for
            options: Batch options

        Returns:
            List of SampleSubmission
        """
        options = options or SampleBatchOptions()
        samples = []

        for _ in range(options.count):
            tier = self.pick_quality_tier(options.score_distribution)
            forced_spam = options.include_spam and self.rng.randint(1, 100) <= options.spam_percentage

            data = self.generator.generate(template, tier, force_spam=forced_spam)
            lead_score = self.scorer.calculate(data)
            spam_score = self.detector.analyze(data).spam_score

            if forced_spam and spam_score < FORCED_SPAM_SCORE_RANGE[0]:
                spam_score = self.rng.randint(*FORCED_SPAM_SCORE_RANGE)

            samples.append(SampleSubmission(
                data=data,
                quality_tier=tier,
                forced_spam=forced_spam,
                lead_score=lead_score,
                spam_score=spam_score,
                ip_address=self.random_ip(),
                user_agent=self.rng.choice(USER_AGENTS),
                submitted_at=self.random_date(options.date_range),
            ))

        logger.info(f"Built {len(samples)} sample submissions for template '{template.id}'")
        return samples

    def pick_quality_tier(self, distribution: Dict[str, int]) -> QualityTier:
        """Pick a tier by cumulative percentage, falling back to good."""
        roll = self.rng.randint(1, 100)
        cumulative = 0
        for tier, percentage in distribution.items():
            cumulative += percentage
            if roll <= cumulative:
                return QualityTier(tier)
        return QualityTier.GOOD

    def random_date(self, date_range: str = "last_30_days") -> datetime:
        now = self._now()
        if date_range == "today":
            start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        else:
            start = now - DATE_RANGES.get(date_range, DATE_RANGES["last_30_days"])

        span = int((now - start).total_seconds())
        return start + timedelta(seconds=self.rng.randint(0, max(span, 0)))

    def random_ip(self) -> str:
        r = self.rng.randint
        return f"{r(1, 255)}.{r(0, 255)}.{r(0, 255)}.{r(0, 255)}"

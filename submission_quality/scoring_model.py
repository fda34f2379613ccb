"""
Lead Scoring Model for Form Architect.

Rule-based quality score for form submissions. Four independent tiers
add up to exactly 100 points when every rule fires.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .field_extractor import (
    FieldRole,
    Submission,
    email_domain,
    extract_email,
    flatten_text,
    has_field,
    has_filled_field,
    has_selection,
    is_valid_email,
)

logger = logging.getLogger(__name__)


PERSONAL_EMAIL_DOMAINS = frozenset({
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "aol.com",
    "icloud.com", "live.com", "msn.com", "ymail.com", "mail.com",
    "protonmail.com", "zoho.com",
})

# Kept apart from the spam detector's list, which has extra entries
DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.com", "10minutemail.com", "guerrillamail.com", "mailinator.com",
    "throwaway.email", "temp-mail.org", "fakeinbox.com", "trashmail.com",
    "getnada.com", "maildrop.cc",
})

BUSINESS_KEYWORDS = (
    "company", "business", "organization", "corporation", "enterprise",
    "firm", "agency", "professional", "commercial", "b2b",
)


def score_color(score: int) -> str:
    """Display colour band (five bands)."""
    if score >= 70:
        return "high"
    elif score >= 60:
        return "medium-high"
    elif score >= 50:
        return "medium"
    elif score >= 40:
        return "low"
    return "very-low"


def score_category(score: int) -> str:
    """Classification band (three bands, independent of the colour bands)."""
    if score >= 70:
        return "high"
    elif score >= 50:
        return "medium"
    return "low"


@dataclass
class LeadScore:
    """Lead score result."""
    score: int  # 0-100
    score_breakdown: Dict[str, int] = field(default_factory=dict)
    signals: List[str] = field(default_factory=list)

    @property
    def category(self) -> str:
        return score_category(self.score)

    @property
    def color(self) -> str:
        return score_color(self.score)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "category": self.category,
            "color": self.color,
            "score_breakdown": self.score_breakdown,
            "signals": self.signals,
        }


class LeadScorer:
    """
    Scores form submissions on completeness and business intent.

    Scoring Rules (0-100):

    Essential fields (max 40)
    - Valid email address: +20
    - Name longer than 2 chars: +10
    - Phone or message longer than 5 chars: +10

    Quality signals (max 30)
    - Phone longer than 5 chars: +10
    - Message longer than 20 chars: +10
    - Checkbox / multi-select used: +10

    Business indicators (max 20)
    - Company longer than 2 chars: +10
    - Email domain neither personal nor disposable: +5
    - Business keyword anywhere in the content: +5

    Engagement (max 10)
    - Message longer than 100 chars: +5
    - Contact preference given: +5

    The phone and message checks in the first two tiers are independent,
    so a phone number is rewarded in both.
    """

    SCORING_RULES = {
        "valid_email": 20,
        "name_provided": 10,
        "contact_method": 10,
        "phone_provided": 10,
        "detailed_message": 10,
        "multiple_selections": 10,
        "company_provided": 10,
        "business_email": 5,
        "business_keywords": 5,
        "long_message": 5,
        "contact_preference": 5,
    }

    TIER_CAPS = {
        "essential_fields": 40,
        "quality_signals": 30,
        "business_indicators": 20,
        "engagement": 10,
    }

    def __init__(
        self,
        personal_domains: Optional[frozenset] = None,
        disposable_domains: Optional[frozenset] = None,
    ):
        """
        Initialize the lead scorer.

        Args:
            personal_domains: Override the personal email provider list
            disposable_domains: Override the disposable email provider list
        """
        self.personal_domains = PERSONAL_EMAIL_DOMAINS if personal_domains is None else personal_domains
        self.disposable_domains = DISPOSABLE_EMAIL_DOMAINS if disposable_domains is None else disposable_domains

    def score(self, submission: Submission) -> LeadScore:
        """
        Calculate the lead score for a submission.

        Args:
            submission: Field name to value mapping

        Returns:
            LeadScore with score and per-tier breakdown
        """
        signals: List[str] = []
        tiers = {
            "essential_fields": self._score_essential_fields(submission, signals),
            "quality_signals": self._score_quality_signals(submission, signals),
            "business_indicators": self._score_business_indicators(submission, signals),
            "engagement": self._score_engagement(submission, signals),
        }

        breakdown = {
            name: min(points, self.TIER_CAPS[name]) for name, points in tiers.items()
        }
        score = max(0, min(100, sum(breakdown.values())))

        logger.debug(f"Lead score {score}: {breakdown}")

        return LeadScore(score=score, score_breakdown=breakdown, signals=signals)

    def calculate(self, submission: Submission) -> int:
        """Return only the numeric lead score."""
        return self.score(submission).score

    def _score_essential_fields(self, submission: Submission, signals: List[str]) -> int:
        score = 0

        if is_valid_email(extract_email(submission)):
            score += self.SCORING_RULES["valid_email"]
            signals.append("Valid email address")

        if has_field(submission, FieldRole.NAME, 2):
            score += self.SCORING_RULES["name_provided"]
            signals.append("Name provided")

        if has_field(submission, FieldRole.PHONE, 5) or has_field(submission, FieldRole.MESSAGE, 5):
            score += self.SCORING_RULES["contact_method"]
            signals.append("Contact method provided")

        return score

    def _score_quality_signals(self, submission: Submission, signals: List[str]) -> int:
        score = 0

        if has_field(submission, FieldRole.PHONE, 5):
            score += self.SCORING_RULES["phone_provided"]
            signals.append("Phone number provided")

        if has_field(submission, FieldRole.MESSAGE, 20):
            score += self.SCORING_RULES["detailed_message"]
            signals.append("Detailed message")

        if has_selection(submission):
            score += self.SCORING_RULES["multiple_selections"]
            signals.append("Options selected")

        return score

    def _score_business_indicators(self, submission: Submission, signals: List[str]) -> int:
        score = 0

        if has_field(submission, FieldRole.COMPANY, 2):
            score += self.SCORING_RULES["company_provided"]
            signals.append("Company provided")

        email = extract_email(submission)
        if is_valid_email(email) and self.is_business_domain(email_domain(email)):
            score += self.SCORING_RULES["business_email"]
            signals.append("Business email domain")

        text = flatten_text(submission).lower()
        if any(keyword in text for keyword in BUSINESS_KEYWORDS):
            score += self.SCORING_RULES["business_keywords"]
            signals.append("Business keywords")

        return score

    def _score_engagement(self, submission: Submission, signals: List[str]) -> int:
        score = 0

        if has_field(submission, FieldRole.MESSAGE, 100):
            score += self.SCORING_RULES["long_message"]
            signals.append("Long message")

        if has_filled_field(submission, FieldRole.CONTACT_PREFERENCE):
            score += self.SCORING_RULES["contact_preference"]
            signals.append("Contact preference specified")

        return score

    def is_business_domain(self, domain: str) -> bool:
        """A domain that is neither a personal nor a disposable provider."""
        domain = domain.lower()
        return bool(domain) and domain not in self.personal_domains and domain not in self.disposable_domains

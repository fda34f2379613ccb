"""
Sample Data Generator for Form Architect.

Produces realistic submissions for a form template at a chosen quality
tier, so demo dashboards and tests get predictable score bands.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .field_extractor import FieldRole, Submission, matches_role

logger = logging.getLogger(__name__)


class QualityTier(Enum):
    """Quality of generated sample submissions."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass
class FieldDescriptor:
    """Form field definition."""
    name: str
    type: str = "text"
    required: bool = False
    options: List[str] = field(default_factory=list)
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDescriptor":
        return cls(
            name=data["name"],
            type=data.get("type", "text"),
            required=bool(data.get("required", False)),
            options=list(data.get("options") or []),
            label=data.get("label"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "options": self.options,
            "label": self.label or self.name.replace("_", " ").title(),
        }


@dataclass
class FormTemplate:
    """Form template with optional per-tier sample value pools."""
    id: str
    name: str
    fields: List[FieldDescriptor]
    category: str = "general"
    description: str = ""
    sample_data_profiles: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }


# Chance (out of 10) of keeping an optional field
OPTIONAL_FIELD_ODDS = {
    QualityTier.EXCELLENT: 10,
    QualityTier.GOOD: 7,
    QualityTier.FAIR: 4,
    QualityTier.POOR: 0,
}

SAMPLE_NAMES = {
    QualityTier.EXCELLENT: [
        "Michael Anderson", "Sarah Thompson", "Jennifer Martinez",
        "David Chen", "Alexandra Wilson", "Robert Johnson",
        "Emily Rodriguez", "James Taylor", "Amanda Brown",
    ],
    QualityTier.GOOD: [
        "John Smith", "Mary Johnson", "Robert Wilson",
        "Jennifer Davis", "Michael Brown", "Lisa Garcia",
    ],
    QualityTier.FAIR: ["mike", "sarah", "john doe", "jane smith", "bob jones"],
    QualityTier.POOR: ["test", "user", "test user", "asdf", "qwerty"],
}

SAMPLE_COMPANIES = {
    QualityTier.EXCELLENT: [
        "TechCorp Solutions", "Digital Innovations Inc", "Global Ventures LLC",
        "Strategic Partners Group", "Innovation Dynamics", "Premier Business Solutions",
    ],
    QualityTier.GOOD: [
        "Smith Consulting", "Johnson & Associates", "Brown Services",
        "Wilson Enterprises", "Davis Solutions",
    ],
    QualityTier.FAIR: ["My Company", "ABC Inc", "The Company"],
    QualityTier.POOR: ["test", "company", "test company"],
}

SAMPLE_SUBJECTS = {
    QualityTier.EXCELLENT: [
        "Partnership Opportunity", "Project Consultation Request",
        "Service Inquiry", "Detailed Quote Request", "Business Proposal",
    ],
    QualityTier.GOOD: [
        "Question about services", "Need information", "Interested in product",
        "Service inquiry", "Request for quote",
    ],
    QualityTier.FAIR: ["question", "info", "inquiry", "need help"],
    QualityTier.POOR: ["test", "hello", "hi", ""],
}

SAMPLE_MESSAGES = {
    QualityTier.EXCELLENT: (
        "I am writing to express my interest in your services. I have reviewed "
        "your offerings and believe there is a strong alignment with our needs. "
        "I would appreciate the opportunity to discuss this further at your "
        "earliest convenience. Please let me know your availability for a "
        "detailed consultation."
    ),
    QualityTier.GOOD: (
        "I'm interested in learning more about your services. Could you please "
        "provide additional information about pricing and availability? Thank you."
    ),
    QualityTier.FAIR: "need more info about services",
    QualityTier.POOR: "test message",
}

SAMPLE_TEXT = {
    QualityTier.EXCELLENT: "Professional input provided",
    QualityTier.GOOD: "Valid information",
    QualityTier.FAIR: "basic info",
    QualityTier.POOR: "test",
}

EMAIL_DOMAINS = {
    QualityTier.EXCELLENT: ["company.com", "business.com", "corporation.com"],
    QualityTier.GOOD: ["gmail.com", "email.com", "yahoo.com"],
    QualityTier.FAIR: ["gmail.com", "yahoo.com"],
    QualityTier.POOR: ["test.com", "example.com"],
}

SPAM_EMAIL_DOMAINS = [
    "tempmail.com", "mailinator.com", "10minutemail.com",
    "guerrillamail.com", "throwaway.email",
]

SPAM_PHRASES = [
    "click here", "buy now", "limited time", "make money fast",
    "free money", "weight loss", "viagra", "casino", "winner",
]

POOR_CHOICES = ["Other", "Not sure", "Not sure yet", "Need guidance"]
VAGUE_CHOICES = ["Other", "Not sure", "Flexible", "No preference"]

# (min, max) options ticked on checkbox fields
CHECKBOX_SELECTIONS = {
    QualityTier.EXCELLENT: (2, 4),
    QualityTier.GOOD: (1, 3),
    QualityTier.FAIR: (0, 2),
    QualityTier.POOR: (0, 0),
}

PHONE_TYPES = ("tel", "phone")


class SampleDataGenerator:
    """
    Generates submissions for a template at a given quality tier.

    Values come from the template's own sample_data_profiles when it has a
    pool for the field, otherwise from generic pools chosen by field type
    and name. With force_spam, emails move to disposable domains and free
    text is replaced with spam phrases regardless of tier.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the generator.

        Args:
            rng: Random source; pass a seeded instance for reproducible output
        """
        self.rng = rng or random.Random()
        self._email_counter = 0

    def generate(
        self,
        template: FormTemplate,
        quality_tier: Union[QualityTier, str] = QualityTier.GOOD,
        force_spam: bool = False,
    ) -> Submission:
        """
        Generate one submission.

        Args:
            template: Form template to fill in
            quality_tier: Target quality tier
            force_spam: Make the submission look like spam

        Returns:
            Field name to value mapping in template field order
        """
        tier = QualityTier(quality_tier)
        profile = template.sample_data_profiles.get(tier.value, {})
        first, last = self._pick_person(tier)

        submission: Submission = {}
        for descriptor in template.fields:
            value = self._field_value(descriptor, profile, tier, force_spam, first, last)
            if descriptor.required or self._include_optional(tier):
                submission[descriptor.name] = value

        return submission

    def _include_optional(self, tier: QualityTier) -> bool:
        odds = OPTIONAL_FIELD_ODDS[tier]
        if odds >= 10:
            return True
        if odds <= 0:
            return False
        return self.rng.randint(1, 10) > 10 - odds

    def _pick_person(self, tier: QualityTier):
        parts = self.rng.choice(SAMPLE_NAMES[tier]).split(" ")
        return parts[0], parts[1] if len(parts) > 1 else "User"

    def _field_value(
        self,
        descriptor: FieldDescriptor,
        profile: Dict[str, List[str]],
        tier: QualityTier,
        force_spam: bool,
        first: str,
        last: str,
    ) -> Union[str, List[str]]:
        pool = profile.get(descriptor.name)
        if pool:
            if isinstance(pool, list):
                value = self.rng.choice(pool)
                return self._process_variables(value, force_spam, first, last)
            return pool

        return self._generic_value(descriptor, tier, force_spam)

    def _process_variables(self, value: str, force_spam: bool, first: str, last: str) -> str:
        value = (
            value.replace("{first}", first.lower())
            .replace("{last}", last.lower())
            .replace("{First}", first)
            .replace("{Last}", last)
            .replace("{rand}", str(self.rng.randint(100, 999)))
        )

        if force_spam and "@" in value:
            local = value.split("@", 1)[0]
            value = f"{local}@{self.rng.choice(SPAM_EMAIL_DOMAINS)}"

        return value

    def _generic_value(
        self,
        descriptor: FieldDescriptor,
        tier: QualityTier,
        force_spam: bool,
    ) -> Union[str, List[str]]:
        field_type = descriptor.type.lower()

        if field_type == "text":
            return self._text_value(descriptor, tier, force_spam)
        if field_type == "email":
            return self._email_value(tier, force_spam)
        if field_type in PHONE_TYPES:
            return self._phone_value(tier)
        if field_type == "textarea":
            return self._textarea_value(tier, force_spam)
        if field_type in ("select", "radio"):
            return self._choice_value(descriptor, tier)
        if field_type == "checkbox":
            return self._checkbox_value(descriptor, tier)
        return ""

    def _text_value(self, descriptor: FieldDescriptor, tier: QualityTier, force_spam: bool) -> str:
        if matches_role(descriptor.name, FieldRole.NAME):
            return self.rng.choice(SAMPLE_NAMES[tier])

        if "company" in descriptor.name.lower():
            return self.rng.choice(SAMPLE_COMPANIES[tier])

        if matches_role(descriptor.name, FieldRole.SUBJECT):
            if force_spam:
                return f"{self.rng.choice(SPAM_PHRASES).upper()}!!!"
            return self.rng.choice(SAMPLE_SUBJECTS[tier])

        if force_spam:
            return f"{self.rng.choice(SPAM_PHRASES).upper()}!!!"
        return SAMPLE_TEXT[tier]

    def _email_value(self, tier: QualityTier, force_spam: bool) -> str:
        self._email_counter += 1

        if force_spam:
            return f"temp{self.rng.randint(100, 999)}@{self.rng.choice(SPAM_EMAIL_DOMAINS)}"

        prefix = "test" if tier == QualityTier.POOR else f"user{self._email_counter}"
        return f"{prefix}@{self.rng.choice(EMAIL_DOMAINS[tier])}"

    def _phone_value(self, tier: QualityTier) -> str:
        r = self.rng.randint
        if tier == QualityTier.EXCELLENT:
            return f"({r(200, 999)}) {r(200, 999)}-{r(1000, 9999)}"
        if tier == QualityTier.GOOD:
            return f"{r(200, 999)}-{r(200, 999)}-{r(1000, 9999)}"
        if tier == QualityTier.FAIR:
            return str(r(2000000000, 9999999999))
        return "1234567890"

    def _textarea_value(self, tier: QualityTier, force_spam: bool) -> str:
        if force_spam:
            phrase = self.rng.choice(SPAM_PHRASES)
            return f"{phrase.upper()}!!! Visit our website NOW! {phrase}"
        return SAMPLE_MESSAGES[tier]

    def _choice_value(self, descriptor: FieldDescriptor, tier: QualityTier) -> str:
        options = descriptor.options
        if not options:
            return ""

        if tier == QualityTier.POOR:
            for choice in POOR_CHOICES:
                if choice in options:
                    return choice
            return options[-1]

        if tier == QualityTier.FAIR and self.rng.randint(1, 10) > 5:
            for choice in VAGUE_CHOICES:
                if choice in options:
                    return choice

        # Excellent draws from the first half, everything else from the first 70%
        share = 0.5 if tier == QualityTier.EXCELLENT else 0.7
        max_index = max(1, math.ceil(len(options) * share))
        return self.rng.choice(options[:max_index])

    def _checkbox_value(self, descriptor: FieldDescriptor, tier: QualityTier) -> List[str]:
        options = descriptor.options
        if not options:
            return []

        low, high = CHECKBOX_SELECTIONS[tier]
        high = min(high, len(options))
        low = min(low, high)
        count = self.rng.randint(low, high)

        if count <= 0:
            return []
        return self.rng.sample(options, count)

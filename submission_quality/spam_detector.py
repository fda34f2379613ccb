"""
Spam Detection for Form Architect.

Multi-factor spam analysis of form submissions:
- Pattern analysis (spam keywords, URLs, caps, punctuation)
- Content quality (length, repeated chars, gibberish)
- Email domain (disposable providers, suspicious TLDs, random local parts)
- Submission behaviour (rapid submissions from one IP)
- Optional AI content analysis
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from .behavior import BehaviorContext, RECENT_WINDOW
from .field_extractor import (
    Submission,
    email_domain,
    email_local_part,
    extract_email,
    string_text,
)

logger = logging.getLogger(__name__)


SPAM_KEYWORDS = (
    "viagra", "cialis", "casino", "lottery", "prize", "winner",
    "click here", "buy now", "limited time", "act now", "free money",
    "work from home", "make money fast", "weight loss", "debt relief",
    "credit repair", "enlargement", "diploma", "earn money",
    "multi-level marketing",
)

DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.com", "10minutemail.com", "guerrillamail.com", "mailinator.com",
    "throwaway.email", "temp-mail.org", "fakeinbox.com", "trashmail.com",
    "getnada.com", "maildrop.cc", "yopmail.com", "sharklasers.com",
    "mintemail.com", "dispostable.com",
})

SUSPICIOUS_TLDS = (".ru", ".cn", ".tk", ".ml", ".ga", ".cf", ".gq")

AI_TEXT_LIMIT = 500
AI_MIN_TEXT_LENGTH = 10

_CAPS_STRIP = str.maketrans("", "", " .,!?\n\r\t")
_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_REPEATED_CHAR = re.compile(r'(.)\1{4,}')
_CONSONANT_CLUSTER = re.compile(r'[bcdfghjklmnpqrstvwxyz]{5,}', re.IGNORECASE)
_ASCII_LETTER = re.compile(r'[a-zA-Z]')
_RANDOM_LOCAL_PART = re.compile(r'^[a-z]{3,5}\d+$', re.IGNORECASE)


class SpamClassifier(Protocol):
    """External text classifier returning spam likelihood 0-10."""

    def classify(self, text: str) -> int:
        ...


@dataclass
class QualityConfig:
    """Settings read by the spam detector at analysis time."""
    spam_threshold: int = 60
    spam_detection_enabled: bool = True
    ai_spam_check_enabled: bool = False
    ai_api_key: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.spam_threshold <= 100:
            raise ValueError(f"spam_threshold must be within 0-100, got {self.spam_threshold}")

    @property
    def ai_enabled(self) -> bool:
        return self.ai_spam_check_enabled and bool(self.ai_api_key)


@dataclass
class SpamAnalysis:
    """Spam analysis result."""
    spam_score: int  # 0-100
    is_spam: bool
    threshold: int
    score_breakdown: Dict[str, int] = field(default_factory=dict)
    signals: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "spam_score": self.spam_score,
            "is_spam": self.is_spam,
            "threshold": self.threshold,
            "score_breakdown": self.score_breakdown,
            "signals": self.signals,
        }


def is_spam(spam_score: int, threshold: int) -> bool:
    """Spam verdict for a stored score against the current threshold."""
    return spam_score >= threshold


class SpamDetector:
    """
    Scores how likely a submission is to be spam.

    Factors (0-100 total):
    - Pattern analysis: max 35
    - Content quality: max 25
    - Email domain: max 20
    - Submission behaviour: max 10
    - AI content analysis: max 10 (optional)

    A submission is spam when its score reaches the configured threshold.
    """

    FACTOR_CAPS = {
        "pattern_analysis": 35,
        "content_quality": 25,
        "email_domain": 20,
        "submission_behavior": 10,
        "ai_content_analysis": 10,
    }

    def __init__(
        self,
        config: Optional[QualityConfig] = None,
        classifier: Optional[SpamClassifier] = None,
        disposable_domains: Optional[frozenset] = None,
    ):
        """
        Initialize the spam detector.

        Args:
            config: Threshold and feature flags
            classifier: Optional AI classifier, used only when enabled in config
            disposable_domains: Override the disposable email provider list
        """
        self.config = config or QualityConfig()
        self.classifier = classifier
        self.disposable_domains = DISPOSABLE_EMAIL_DOMAINS if disposable_domains is None else disposable_domains

    def analyze(
        self,
        submission: Submission,
        behavior: Optional[BehaviorContext] = None,
        ip_address: Optional[str] = None,
    ) -> SpamAnalysis:
        """
        Analyze a submission for spam.

        Args:
            submission: Field name to value mapping
            behavior: Recent-submission lookup for the submitter's IP
            ip_address: Submitter's IP address

        Returns:
            SpamAnalysis with score, verdict and breakdown
        """
        threshold = self.config.spam_threshold

        if not self.config.spam_detection_enabled:
            return SpamAnalysis(spam_score=0, is_spam=False, threshold=threshold)

        signals: List[str] = []
        text = string_text(submission)

        factors = {
            "pattern_analysis": self._check_spam_patterns(text, signals),
            "content_quality": self._check_content_quality(text, signals),
            "email_domain": self._check_email_domain(submission, signals),
            "submission_behavior": self._check_submission_behavior(behavior, ip_address, signals),
        }
        if self.config.ai_enabled and self.classifier is not None:
            factors["ai_content_analysis"] = self._ai_content_analysis(text, signals)

        breakdown = {
            name: min(points, self.FACTOR_CAPS[name]) for name, points in factors.items()
        }
        spam_score = max(0, min(100, sum(breakdown.values())))

        logger.debug(f"Spam score {spam_score}: {breakdown}")

        return SpamAnalysis(
            spam_score=spam_score,
            is_spam=is_spam(spam_score, threshold),
            threshold=threshold,
            score_breakdown=breakdown,
            signals=signals,
        )

    def _check_spam_patterns(self, text: str, signals: List[str]) -> int:
        score = 0
        lowered = text.lower()

        if any(keyword in lowered for keyword in SPAM_KEYWORDS):
            score += 15
            signals.append("Spam keywords")

        url_count = lowered.count("http")
        if url_count > 3:
            score += 20
            signals.append(f"Excessive URLs ({url_count})")
        elif url_count > 1:
            score += 10
            signals.append(f"Multiple URLs ({url_count})")

        stripped = text.translate(_CAPS_STRIP)
        if len(stripped) > 20:
            letters = [c for c in stripped if c in _ASCII_LETTERS]
            uppercase = sum(1 for c in letters if c.isupper())
            if letters and uppercase / len(letters) > 0.5:
                score += 15
                signals.append("Mostly uppercase")

        if "!!!" in text or "???" in text:
            score += 10
            signals.append("Excessive punctuation")

        return score

    def _check_content_quality(self, text: str, signals: List[str]) -> int:
        score = 0
        length = len(text.strip())

        if 0 < length < 10:
            score += 20
            signals.append("Too short")

        if _REPEATED_CHAR.search(text):
            score += 15
            signals.append("Repeated characters")

        if len(_CONSONANT_CLUSTER.findall(text)) > 3:
            score += 15
            signals.append("Gibberish")

        if length > 5:
            no_spaces = text.replace(" ", "")
            all_digits = bool(no_spaces) and all(c in "0123456789" for c in no_spaces)
            if all_digits or not _ASCII_LETTER.search(no_spaces):
                score += 10
                signals.append("No alphabetic content")

        return score

    def _check_email_domain(self, submission: Submission, signals: List[str]) -> int:
        email = extract_email(submission)
        domain = email_domain(email)
        if not domain:
            return 0

        score = 0

        if domain in self.disposable_domains:
            score += 20
            signals.append(f"Disposable email domain ({domain})")

        if domain.endswith(SUSPICIOUS_TLDS):
            score += 10
            signals.append("Suspicious TLD")

        if _RANDOM_LOCAL_PART.match(email_local_part(email)):
            score += 10
            signals.append("Random-looking email address")

        return score

    def _check_submission_behavior(
        self,
        behavior: Optional[BehaviorContext],
        ip_address: Optional[str],
        signals: List[str],
    ) -> int:
        if behavior is None or not ip_address:
            return 0

        try:
            recent_count = behavior.count_recent_submissions(ip_address, RECENT_WINDOW)
        except Exception as e:
            logger.warning(f"Recent submission lookup failed for {ip_address}: {e}")
            return 0

        if recent_count > 5:
            signals.append(f"Rapid submissions ({recent_count} in the last hour)")
            return 10
        elif recent_count > 3:
            signals.append(f"Repeated submissions ({recent_count} in the last hour)")
            return 5
        return 0

    def _ai_content_analysis(self, text: str, signals: List[str]) -> int:
        content = text[:AI_TEXT_LIMIT]
        if len(content.strip()) < AI_MIN_TEXT_LENGTH:
            return 0

        try:
            ai_score = int(self.classifier.classify(content))
        except Exception as e:
            logger.warning(f"AI spam classification failed: {e}")
            return 0

        ai_score = max(0, min(10, ai_score))
        if ai_score:
            signals.append(f"AI spam likelihood {ai_score}/10")
        return ai_score

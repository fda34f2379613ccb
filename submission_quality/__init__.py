"""
Submission Quality Module for Form Architect.

This module scores incoming form submissions:
- Field extraction (email, name, phone, message, company)
- Lead scoring (0-100 scale)
- Spam detection with a configurable threshold
- Sample submission generation for form templates
- Auto-responses tuned to the lead score
"""

from .behavior import BehaviorContext, StaticBehaviorContext
from .scoring_model import LeadScorer, LeadScore
from .spam_detector import QualityConfig, SpamAnalysis, SpamClassifier, SpamDetector, is_spam
from .sample_data import FieldDescriptor, FormTemplate, QualityTier, SampleDataGenerator
from .templates import (
    SampleBatchBuilder,
    SampleBatchOptions,
    SampleSubmission,
    TemplateLibrary,
    TemplateNotFoundError,
)

__all__ = [
    "BehaviorContext",
    "StaticBehaviorContext",
    "LeadScorer",
    "LeadScore",
    "QualityConfig",
    "SpamAnalysis",
    "SpamClassifier",
    "SpamDetector",
    "is_spam",
    "FieldDescriptor",
    "FormTemplate",
    "QualityTier",
    "SampleDataGenerator",
    "SampleBatchBuilder",
    "SampleBatchOptions",
    "SampleSubmission",
    "TemplateLibrary",
    "TemplateNotFoundError",
]

"""
LLM Module for Form Architect.

This module handles:
- LLM provider abstraction (OpenAI)
- Prompt template management
- AI spam classification with an hourly quota
- Form generation from plain-language descriptions
"""

from .form_generator import FormGenerationError, FormGenerator, GeneratedForm
from .prompt_templates import PromptTemplates, PromptType
from .quota import HourlyQuota
from .spam_classifier import AISpamClassifier

__all__ = [
    "AISpamClassifier",
    "FormGenerationError",
    "FormGenerator",
    "GeneratedForm",
    "HourlyQuota",
    "PromptTemplates",
    "PromptType",
]

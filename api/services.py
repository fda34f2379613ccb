"""
Service initialization and dependency injection for Form Architect API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Optional

from channels.base import ChannelProvider
from channels.email import build_email_channel
from config.settings import get_settings, Settings
from llm.form_generator import FormGenerator
from llm.quota import HourlyQuota
from llm.spam_classifier import AISpamClassifier
from submission_quality.auto_responder import AutoResponder
from submission_quality.scoring_model import LeadScorer
from submission_quality.spam_detector import SpamDetector
from submission_quality.templates import SampleBatchBuilder, TemplateLibrary

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.ai_provider = None
        self.lead_scorer: Optional[LeadScorer] = None
        self.spam_detector: Optional[SpamDetector] = None
        self.template_library: Optional[TemplateLibrary] = None
        self.batch_builder: Optional[SampleBatchBuilder] = None
        self.email_channel: Optional[ChannelProvider] = None
        self.auto_responder: Optional[AutoResponder] = None
        self.form_generator: Optional[FormGenerator] = None
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services (AI configured: {self.settings.ai_configured})")

        self._init_ai_provider()
        self._init_scoring()
        self._init_templates()
        self._init_auto_responder()
        self._init_form_generator()
        self._initialized = True
        logger.info("All services initialized successfully")

    def _init_ai_provider(self):
        """Initialize the LLM provider when an API key is set."""
        s = self.settings
        if not s.ai_configured:
            logger.info("OPENAI_API_KEY not set, AI features disabled")
            return

        try:
            from llm.providers.openai_provider import OpenAIProvider
            self.ai_provider = OpenAIProvider(
                api_key=s.openai_api_key,
                model_id=s.openai_llm_model,
                timeout=s.ai_request_timeout,
            )
        except Exception as e:
            logger.warning(f"OpenAI provider unavailable, AI features disabled: {e}")

    def _init_scoring(self):
        """Initialize lead scoring and spam detection."""
        s = self.settings
        quality_config = s.quality_config()

        classifier = None
        if quality_config.ai_enabled and self.ai_provider is not None:
            classifier = AISpamClassifier(self.ai_provider, HourlyQuota(s.ai_spam_hourly_limit))

        self.lead_scorer = LeadScorer()
        self.spam_detector = SpamDetector(quality_config, classifier=classifier)
        logger.info(f"Scoring services ready (spam threshold {quality_config.spam_threshold})")

    def _init_templates(self):
        self.template_library = TemplateLibrary()
        self.batch_builder = SampleBatchBuilder(
            scorer=self.lead_scorer,
            detector=SpamDetector(self.settings.quality_config()),
        )

    def _init_auto_responder(self):
        s = self.settings
        self.email_channel = build_email_channel(s.sendgrid_api_key, s.from_email, s.from_name)
        self.auto_responder = AutoResponder(
            s.auto_response_config(),
            self.email_channel,
            provider=self.ai_provider,
            quota=HourlyQuota(s.auto_response_hourly_limit),
        )

    def _init_form_generator(self):
        s = self.settings
        self.form_generator = FormGenerator(
            provider=self.ai_provider,
            quota=HourlyQuota(s.form_generation_hourly_limit),
            timeout=s.form_generation_timeout,
        )

    @property
    def spam_threshold(self) -> int:
        return self.spam_detector.config.spam_threshold

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.spam_detector is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "lead_scoring": self.lead_scorer is not None,
            "spam_detection": self.spam_detector is not None,
            "ai_provider": self.ai_provider is not None,
            "auto_responder": self.auto_responder is not None,
            "form_generator": self.form_generator is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()

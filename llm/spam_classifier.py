"""
AI spam classification for Form Architect.

Asks an LLM for a single 0-10 spam likelihood. Best effort: any failure
counts as "not spam" (0) so scoring never stalls on the network.
"""

import logging
import re
from typing import Optional

from .prompt_templates import PromptTemplates, PromptType
from .quota import HourlyQuota

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_score(reply: Optional[str]) -> Optional[int]:
    """Read the leading integer of a reply, e.g. ``"7/10"`` -> 7."""
    if not reply:
        return None
    match = _LEADING_INT.match(reply)
    return int(match.group(1)) if match else None


class AISpamClassifier:
    """
    Spam classifier backed by an LLM provider.

    The provider must expose ``generate(prompt, system=..., max_tokens=...,
    temperature=...)``.
    """

    MAX_TOKENS = 10
    TEMPERATURE = 0.3

    def __init__(self, provider, quota: Optional[HourlyQuota] = None):
        """
        Initialize the classifier.

        Args:
            provider: LLM provider
            quota: Hourly call quota; unlimited when omitted
        """
        self.provider = provider
        self.quota = quota

    def classify(self, text: str) -> int:
        """
        Classify text as spam on a 0-10 scale.

        Args:
            text: Submission text, already truncated by the caller

        Returns:
            Spam likelihood 0-10, 0 on any failure
        """
        if self.quota is not None and not self.quota.allow():
            return 0

        try:
            reply = self.provider.generate(
                text,
                system=PromptTemplates.get_system_prompt(PromptType.SPAM_CHECK),
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
            )
        except Exception as e:
            logger.warning(f"AI spam check failed: {e}")
            return 0

        score = parse_score(reply)
        if score is None:
            logger.warning(f"Unparseable AI spam reply: {reply!r}")
            return 0

        if self.quota is not None:
            self.quota.record()

        return max(0, min(10, score))

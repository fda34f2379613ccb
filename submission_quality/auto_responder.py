"""
Lead-score aware auto-responses.

Drafts a reply to the submitter (through the LLM when one is configured,
otherwise from fixed templates) and hands it to an email channel.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from channels.base import ChannelMessage, ChannelProvider
from channels.email import clean_header
from llm.prompt_templates import PromptTemplates
from llm.quota import HourlyQuota

from .field_extractor import Submission, extract_email, extract_name, is_valid_email

logger = logging.getLogger(__name__)

HIGH_PRIORITY_SCORE = 80
MEDIUM_PRIORITY_SCORE = 50
LOW_SCORE_CUTOFF = 30


def response_type(lead_score: int) -> str:
    if lead_score >= HIGH_PRIORITY_SCORE:
        return "high_priority"
    if lead_score >= MEDIUM_PRIORITY_SCORE:
        return "medium_priority"
    return "low_priority"


@dataclass
class AutoResponseConfig:
    """Auto-response settings."""
    enabled: bool = False
    skip_low_scores: bool = False
    from_name: str = "Form Architect"
    reply_to_email: Optional[str] = None
    timeout: float = 15.0

    def __post_init__(self):
        self.from_name = clean_header(self.from_name)


@dataclass
class EmailContent:
    subject: str
    body: str
    generated_by: str = "template"


@dataclass
class AutoResponseResult:
    """Outcome of one auto-response attempt."""
    sent: bool
    reason: str = ""
    recipient: str = ""
    subject: str = ""
    body: str = ""
    response_type: str = ""
    generated_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sent": self.sent,
            "reason": self.reason,
            "recipient": self.recipient,
            "subject": self.subject,
            "response_type": self.response_type,
            "generated_by": self.generated_by,
        }


def fallback_content(submission: Submission, kind: str, from_name: str) -> EmailContent:
    """Fixed reply for when no AI draft is available."""
    name = extract_name(submission)

    if kind == "high_priority":
        subject = "Great to hear from you" + (f", {name}" if name else "") + "!"
        body = (
            "Hi" + (f" {name}" if name else "") + ",\n\n"
            "Thank you for reaching out to us. We're excited about the opportunity to work with you!\n\n"
            "Based on what you've shared, I think we can definitely help. One of our team members "
            "will be in touch within 24 hours to discuss your needs in detail.\n\n"
            "Looking forward to connecting!\n\n"
            f"Best regards,\n{from_name}"
        )
    elif kind == "medium_priority":
        subject = "Thank you for your inquiry"
        body = (
            "Hello" + (f" {name}" if name else "") + ",\n\n"
            "Thank you for contacting us. We've received your message and will review it shortly.\n\n"
            "One of our team members will get back to you within 24-48 hours to discuss how we can assist you.\n\n"
            f"Best regards,\n{from_name}"
        )
    else:
        subject = "We received your submission"
        body = (
            "Hello,\n\n"
            "Thank you for your submission. We've received your information and will be in touch "
            "if we have any questions.\n\n"
            f"Best regards,\n{from_name}"
        )

    return EmailContent(subject=subject, body=body)


def parse_email_json(reply: Optional[str]) -> Optional[EmailContent]:
    """Parse an AI reply of the form {"subject": ..., "body": ...}."""
    if not reply:
        return None
    try:
        data = json.loads(reply)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    subject = data.get("subject")
    body = data.get("body")
    if not isinstance(subject, str) or not isinstance(body, str):
        return None
    subject = clean_header(subject).strip()
    body = body.strip()
    if not subject or not body:
        return None
    return EmailContent(subject=subject, body=body, generated_by="ai")


class AutoResponder:
    """
    Sends an acknowledgement email for a new submission.

    Skips when disabled, when low scores are excluded and the lead score
    is under 30, and when the submission carries no valid email address.
    """

    MAX_TOKENS = 500
    TEMPERATURE = 0.7

    def __init__(
        self,
        config: AutoResponseConfig,
        channel: ChannelProvider,
        provider=None,
        quota: Optional[HourlyQuota] = None,
    ):
        self.config = config
        self.channel = channel
        self.provider = provider
        self.quota = quota

    async def respond(self, submission: Submission, lead_score: int) -> AutoResponseResult:
        """
        Compose and send the auto-response.

        Args:
            submission: Submitted form data
            lead_score: Lead score of the submission

        Returns:
            AutoResponseResult
        """
        if not self.config.enabled:
            return AutoResponseResult(sent=False, reason="disabled")

        if self.config.skip_low_scores and lead_score < LOW_SCORE_CUTOFF:
            return AutoResponseResult(sent=False, reason="low_score")

        recipient = extract_email(submission).strip()
        if not is_valid_email(recipient):
            return AutoResponseResult(sent=False, reason="no_recipient")

        kind = response_type(lead_score)
        content = await asyncio.to_thread(self.compose, submission, lead_score, kind)

        result = await self.channel.send_message(ChannelMessage(
            to=recipient,
            subject=content.subject,
            content=content.body,
            reply_to=self.config.reply_to_email,
        ))

        if not result.success:
            logger.warning(f"Auto-response to {recipient} failed: {result.error}")
        else:
            logger.info(f"Auto-response ({kind}, {content.generated_by}) sent to {recipient}")

        return AutoResponseResult(
            sent=result.success,
            reason="sent" if result.success else "delivery_failed",
            recipient=recipient,
            subject=content.subject,
            body=content.body,
            response_type=kind,
            generated_by=content.generated_by,
        )

    def compose(self, submission: Submission, lead_score: int, kind: str) -> EmailContent:
        """AI draft when possible, fixed template otherwise."""
        drafted = self._ai_content(submission, lead_score, kind)
        if drafted is not None:
            return drafted
        return fallback_content(submission, kind, self.config.from_name)

    def _ai_content(self, submission: Submission, lead_score: int, kind: str) -> Optional[EmailContent]:
        if self.provider is None:
            return None
        if self.quota is not None and not self.quota.allow():
            return None

        system = PromptTemplates.build_auto_response_prompt(
            submission, lead_score, kind, company_name=self.config.from_name,
        )
        try:
            reply = self.provider.generate(
                PromptTemplates.get_user_prompt("auto_response"),
                system=system,
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
                timeout=self.config.timeout,
            )
        except Exception as e:
            logger.warning(f"AI auto-response draft failed: {e}")
            return None

        content = parse_email_json(reply)
        if content is None:
            logger.warning("AI auto-response draft was not valid JSON, using template")
            return None

        if self.quota is not None:
            self.quota.record()
        return content

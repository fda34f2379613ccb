"""
Prompt Templates for Form Architect.

Prompts for AI spam classification, auto-response emails and form generation.
"""

from enum import Enum
from typing import Any, Dict, Optional


class PromptType(Enum):
    """Types of prompts."""
    SPAM_CHECK = "spam_check"
    AUTO_RESPONSE = "auto_response"
    FORM_GENERATION = "form_generation"


class PromptTemplates:
    """Prompt templates used with the LLM providers."""

    SYSTEM_PROMPTS = {
        PromptType.SPAM_CHECK: (
            "You are a spam detector. Analyze the following form submission and "
            "respond with ONLY a number from 0-10, where 0 is definitely not spam "
            "and 10 is definitely spam. No explanation, just the number."
        ),

        PromptType.AUTO_RESPONSE: """You are a professional email writer for {company_name}. Generate a personalized email response to a form submission.

Response Type: {response_level}
Lead Score: {lead_score}/100

Form Data:
{form_data}

Requirements:
- Professional but friendly tone
- Personalize using their name and details from the submission
- Keep under 200 words
- Include clear next steps appropriate for the response type
- Match response enthusiasm to lead score (higher score = more enthusiastic)
- NO marketing spam or hard sales pressure
- Format as plain text email (no HTML)
- For high priority: offer to connect, schedule call, or provide detailed help
- For medium priority: thank them and set expectations for follow-up
- For low priority: acknowledge submission and provide general resources

Return ONLY valid JSON with this exact structure:
{{
  "subject": "Email subject line (max 60 characters)",
  "body": "Email body text"
}}""",

        PromptType.FORM_GENERATION: (
            "You are a professional form designer. You generate structured form "
            "configurations in JSON format."
        ),
    }

    USER_TEMPLATES = {
        "auto_response": "Generate the auto-response email.",
    }

    @classmethod
    def get_system_prompt(cls, prompt_type: PromptType, **kwargs) -> str:
        """
        Get system prompt for a given type.

        Args:
            prompt_type: Type of prompt
            **kwargs: Template variables

        Returns:
            Formatted system prompt
        """
        prompt = cls.SYSTEM_PROMPTS[prompt_type]
        return prompt.format(**kwargs) if kwargs else prompt

    @classmethod
    def get_user_prompt(cls, template_name: str, **kwargs) -> str:
        """Get formatted user prompt."""
        template = cls.USER_TEMPLATES.get(template_name, "{text}")
        return template.format(**kwargs)

    @classmethod
    def format_submission(cls, submission: Dict[str, Any]) -> str:
        """Render submission fields as ``Label: value`` lines."""
        lines = []
        for key, value in submission.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            label = str(key).replace("_", " ")
            lines.append(f"{label[:1].upper()}{label[1:]}: {value}")
        return "\n".join(lines)

    @classmethod
    def build_auto_response_prompt(
        cls,
        submission: Dict[str, Any],
        lead_score: int,
        response_type: str,
        company_name: Optional[str] = None,
    ) -> str:
        """Build the auto-response system prompt for a submission."""
        return cls.get_system_prompt(
            PromptType.AUTO_RESPONSE,
            company_name=company_name or "our team",
            response_level=response_type.replace("_", " "),
            lead_score=lead_score,
            form_data=cls.format_submission(submission),
        )

    FORM_FIELD_COUNTS = {
        "simple": "3-5",
        "intermediate": "6-10",
        "advanced": "10-15",
    }

    @classmethod
    def build_form_generation_prompt(
        cls,
        description: str,
        complexity: str = "intermediate",
        purpose: str = "",
        audience: str = "",
        field_types: tuple = (),
    ) -> str:
        """Build the user prompt asking for a form definition as JSON."""
        field_count = cls.FORM_FIELD_COUNTS.get(complexity, cls.FORM_FIELD_COUNTS["intermediate"])
        types = "|".join(field_types)

        parts = [
            "Generate a complete, production-ready form structure based on the following requirements.",
            "",
            f"FORM DESCRIPTION:\n{description}",
            "",
        ]
        if purpose:
            parts.append(f"PURPOSE: {purpose}")
        if audience:
            parts.append(f"TARGET AUDIENCE: {audience}")
        parts.extend([
            f"COMPLEXITY: {complexity} ({field_count} fields)",
            "",
            "REQUIREMENTS:",
            f"1. Create exactly {field_count} relevant fields",
            f"2. Use appropriate field types: {', '.join(field_types)}",
            "3. Add clear, user-friendly labels",
            "4. Mark the fields a submitter must fill in as required",
            "5. For select/radio/checkbox fields, provide 3-6 realistic options",
            "6. Ensure logical field ordering (name/email first, message/comments last)",
            "",
            "OUTPUT FORMAT: Respond with ONLY valid JSON (no markdown, no explanation):",
            "{",
            '  "form_title": "Clear, descriptive form title",',
            '  "form_description": "Brief description of form purpose",',
            '  "fields": [',
            f'    {{"type": "{types}", "label": "Field Label", "required": true, "options": ["Option 1"]}}',
            "  ],",
            '  "submit_button_text": "Submit button text"',
            "}",
        ])
        return "\n".join(parts)

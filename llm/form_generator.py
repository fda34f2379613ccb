"""
AI Form Generator for Form Architect.

Turns a plain-language description into a form definition:
- Prompt built from description, complexity, purpose and audience
- One LLM call, counted against an hourly quota when it succeeds
- Reply parsed into FieldDescriptor objects with types and options checked
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from submission_quality.sample_data import FieldDescriptor
from .prompt_templates import PromptTemplates, PromptType
from .quota import HourlyQuota

logger = logging.getLogger(__name__)


FORM_FIELD_TYPES = (
    "text", "email", "tel", "textarea", "select", "radio", "checkbox", "date", "number", "url",
)
CHOICE_FIELD_TYPES = ("select", "radio", "checkbox")
COMPLEXITY_LEVELS = tuple(PromptTemplates.FORM_FIELD_COUNTS)

MIN_DESCRIPTION_LENGTH = 10

_FENCED_JSON = re.compile(r'```(?:json)?\s*(\{.*?\})\s*```', re.DOTALL)
_NAME_CHARS = re.compile(r'[^a-z0-9_\-]')


class FormGenerationError(Exception):
    """Form generation failed; ``code`` says why."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class GeneratedForm:
    """Form definition produced by the LLM."""
    name: str
    fields: List[FieldDescriptor]
    description: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
            "settings": self.settings,
        }


def field_name_from_label(label: str, index: int) -> str:
    """``"Full Name"`` -> ``"full_name"``; falls back to ``field_<n>``."""
    name = _NAME_CHARS.sub("", label.strip().lower().replace(" ", "_"))
    return name or f"field_{index + 1}"


def parse_form_response(reply: Optional[str]) -> GeneratedForm:
    """
    Parse an LLM reply into a form definition.

    The JSON may be wrapped in a markdown code fence. Entries without a
    ``type`` and ``label`` are skipped, unknown types become ``text`` and
    options are kept only for choice fields. Duplicate names get a numeric
    suffix.

    Raises:
        FormGenerationError: reply is not JSON or holds no usable fields
    """
    text = reply or ""
    fenced = _FENCED_JSON.search(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        raise FormGenerationError("invalid_json", "Failed to parse AI response. Please try again.")

    if not isinstance(data, dict) or not isinstance(data.get("fields"), list):
        raise FormGenerationError("invalid_structure", "AI response missing required fields array.")

    fields: List[FieldDescriptor] = []
    seen = set()
    for index, entry in enumerate(data["fields"]):
        if not isinstance(entry, dict):
            continue
        label, field_type = entry.get("label"), entry.get("type")
        if not isinstance(label, str) or not label.strip() or not isinstance(field_type, str):
            continue

        field_type = field_type.strip().lower()
        if field_type not in FORM_FIELD_TYPES:
            field_type = "text"

        name = field_name_from_label(label, index)
        base, suffix = name, 2
        while name in seen:
            name = f"{base}_{suffix}"
            suffix += 1
        seen.add(name)

        options: List[str] = []
        if field_type in CHOICE_FIELD_TYPES and isinstance(entry.get("options"), list):
            options = [str(o).strip() for o in entry["options"] if str(o).strip()]

        fields.append(FieldDescriptor(
            name=name,
            type=field_type,
            required=entry.get("required") is True,
            options=options,
            label=label.strip(),
        ))

    if not fields:
        raise FormGenerationError(
            "no_fields",
            "AI response contains no fields. Please try again with a more detailed description.",
        )

    title = data.get("form_title")
    submit_text = data.get("submit_button_text")
    description = data.get("form_description")
    return GeneratedForm(
        name=title.strip() if isinstance(title, str) and title.strip() else "Generated Form",
        fields=fields,
        description=description.strip() if isinstance(description, str) else "",
        settings={
            "submit_button_text": (
                submit_text.strip() if isinstance(submit_text, str) and submit_text.strip() else "Submit"
            ),
            "success_message": "Thank you! Your form has been submitted successfully.",
        },
    )


class FormGenerator:
    """
    Generates form definitions from descriptions with an LLM.

    The provider only needs ``generate(prompt, system, max_tokens,
    temperature, timeout)``; with no provider every request fails with
    ``missing_api_key``.
    """

    MAX_TOKENS = 2000
    TEMPERATURE = 0.7

    def __init__(self, provider=None, quota: Optional[HourlyQuota] = None, timeout: float = 30.0):
        """
        Initialize the generator.

        Args:
            provider: LLM provider, or None when AI is not configured
            quota: Hourly limit on successful generations
            timeout: Request timeout in seconds
        """
        self.provider = provider
        self.quota = quota
        self.timeout = timeout

    def generate(
        self,
        description: str,
        complexity: str = "intermediate",
        purpose: str = "",
        audience: str = "",
    ) -> GeneratedForm:
        """
        Generate a form from a description.

        Raises:
            FormGenerationError: invalid input, quota exhausted, AI not
                configured, request failure or an unusable reply
        """
        description = (description or "").strip()
        if len(description) < MIN_DESCRIPTION_LENGTH:
            raise FormGenerationError(
                "invalid_description",
                f"Form description is too short. Please provide at least {MIN_DESCRIPTION_LENGTH} characters.",
            )
        if complexity not in COMPLEXITY_LEVELS:
            complexity = "intermediate"

        if self.quota is not None and not self.quota.allow():
            raise FormGenerationError("rate_limit_exceeded", "Rate limit exceeded. Please try again later.")

        if self.provider is None:
            raise FormGenerationError(
                "missing_api_key", "API key not configured. Please add your API key in Settings.",
            )

        prompt = PromptTemplates.build_form_generation_prompt(
            description, complexity, purpose.strip(), audience.strip(), FORM_FIELD_TYPES,
        )
        try:
            reply = self.provider.generate(
                prompt,
                system=PromptTemplates.get_system_prompt(PromptType.FORM_GENERATION),
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning(f"Form generation request failed: {e}")
            raise FormGenerationError("api_request_failed", f"API request failed: {e}") from e

        form = parse_form_response(reply)
        if self.quota is not None:
            self.quota.record()

        logger.info(f"Generated form '{form.name}' with {len(form.fields)} fields ({complexity})")
        return form

"""
OpenAI LLM Provider.
"""

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """
    OpenAI chat completion provider.

    Used for two short calls per submission at most: the spam likelihood
    check and the auto-response draft. Retries are disabled so a slow API
    only ever costs one timeout.
    """

    DEFAULT_MODEL = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: str = DEFAULT_MODEL,
        max_tokens: int = 500,
        temperature: float = 0.3,
        timeout: float = 5.0,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model_id: Model ID
            max_tokens: Default completion size
            temperature: Default sampling temperature
            timeout: Default request timeout in seconds
        """
        from openai import OpenAI

        self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model_id = model_id
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

        logger.info(f"OpenAI provider ready: {model_id} (timeout {timeout}s)")

    @staticmethod
    def build_messages(prompt: str, system: Optional[str] = None) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Single-turn completion.

        Args:
            prompt: User message
            system: Optional system instruction
            max_tokens: Per-call completion size
            temperature: Per-call temperature
            timeout: Per-call timeout in seconds

        Returns:
            Reply text, stripped; empty when the model returned no content
        """
        try:
            response = self._client.chat.completions.create(
                model=self.model_id,
                messages=self.build_messages(prompt, system),
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                timeout=timeout or self.timeout,
            )
        except Exception as e:
            logger.error(f"OpenAI completion failed ({self.model_id}): {e}")
            raise

        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()

"""
Language model access through the OpenAI chat completions API.
"""

import logging

from openai import OpenAI, OpenAIError

from .config import Config
from .errors import RemoteServiceError

logger = logging.getLogger(__name__)


def estimate_tokens(text: str) -> int:
    """
    Rough token count for a prompt.

    Approximates GPT tokenization from the word count; the 1.3
    multiplier accounts for subword splits of punctuation and numbers.
    """
    if not text:
        return 0
    return int(len(text.split()) * 1.3)


class LanguageModel:
    """Single-turn chat with the configured OpenAI model."""

    def __init__(self, config: Config, client: OpenAI | None = None):
        self.model = config.openai_model
        self.temperature = config.openai_temperature
        self.client = client or OpenAI(api_key=config.openai_api_key)

    def count_tokens(self, prompt: str) -> int:
        return estimate_tokens(prompt)

    def chat(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Raises:
            RemoteServiceError: If the API call fails or returns nothing.
        """
        try:
            tokens = self.count_tokens(prompt)
            logger.info(f"Chatting with {self.model}: ~{tokens} tokens")
        except Exception as e:
            logger.warning(f"Error counting tokens: {e}")

        logger.debug(f"Sending prompt to {self.model}:\n{prompt}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise RemoteServiceError(f"failed to generate response: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise RemoteServiceError("failed to generate response: empty response from OpenAI")

        return response.choices[0].message.content.strip()

"""Single-call gateway to the LLM provider (OpenAI chat completions)."""

import asyncio
from typing import Optional

import openai
from openai import AsyncOpenAI

from cv_portfolio.config import LLM_TIMEOUT_SECONDS, MODEL_NAME, OPENAI_API_KEY, OPENAI_BASE_URL
from cv_portfolio.errors import GatewayError, GatewayTimeout
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


class ModelGateway:
    """
    Sends one prompt, returns the raw completion text.
    No retries and no streaming; the call is bounded by `timeout` seconds.
    """

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = MODEL_NAME,
        timeout: float = LLM_TIMEOUT_SECONDS,
        base_url: str = OPENAI_BASE_URL,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = base_url
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise GatewayError("OPENAI_API_KEY is not set; cannot run CV extraction")
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url or None,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            logger.error("LLM call timed out after %ss", self.timeout)
            raise GatewayTimeout(f"Model call timed out after {self.timeout}s") from e
        except openai.OpenAIError as e:
            logger.error("LLM call failed: %s", e.__class__.__name__)
            raise GatewayError(f"Model call failed: {e.__class__.__name__}") from e

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            logger.warning("LLM returned an empty completion")
            return ""
        return choice.message.content

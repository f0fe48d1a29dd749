import logging
import os
from typing import Optional

import backoff
import httpx

from app.services.pharmacogenomics.config import LLMConfig, get_llm_config

logger = logging.getLogger(__name__)


def _is_client_error(e: Exception) -> bool:
    return isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500


class GroqClient:
    """
    Client for Groq's hosted chat completions API (OpenAI-compatible).
    Returns None instead of raising; callers fall back to static text.
    """

    def __init__(self, api_key: Optional[str] = None, config: Optional[LLMConfig] = None):
        self.config = config or get_llm_config()
        self.api_key = api_key if api_key is not None else os.environ.get("GROQ_API_KEY", "")
        self.model = self.config.model

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @backoff.on_exception(
        backoff.expo,
        (httpx.RequestError, httpx.HTTPStatusError),
        max_tries=2,
        giveup=_is_client_error,
    )
    async def _post(self, payload: dict) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            response = await client.post(self.config.api_url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()

    async def generate_text(self, system_prompt: str, prompt: str) -> Optional[str]:
        """Low temperature completion for consistent, factual responses."""
        if not self.configured:
            logger.warning("GROQ_API_KEY not set; skipping LLM request")
            return None

        logger.info("Sending request to Groq", extra={"model": self.model})

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

        try:
            data = await self._post(payload)
            generated_text = data["choices"][0]["message"]["content"]
            logger.info("Groq request successful", extra={"response_length": len(generated_text or "")})
            return generated_text

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Error communicating with Groq: {str(e)}")
            return None
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected response shape from Groq: {str(e)}")
            return None

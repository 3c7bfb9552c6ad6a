"""Thin client over the configured LLM provider."""

import logging
import time
import threading
from typing import Optional

from core.errors import ServerError

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


class TextGenerationError(ServerError):
    default_message = "Failed to generate text."


class TextGenerator:
    """Sends a prompt to DeepSeek, OpenAI or Anthropic and returns the reply text."""

    def __init__(self, provider: str = "deepseek", deepseek_api_key: str = "",
                 openai_api_key: str = "", anthropic_api_key: str = "",
                 model_name: str = "deepseek-chat", timeout: float = 30.0,
                 min_call_interval: float = 0.0):
        self.provider = (provider or "").lower()
        self.deepseek_api_key = deepseek_api_key
        self.openai_api_key = openai_api_key
        self.anthropic_api_key = anthropic_api_key
        self.model_name = model_name
        self.timeout = timeout
        self._min_call_interval = min_call_interval
        self._last_api_call = 0.0
        self._rate_limit_lock = threading.Lock()

    def _rate_limit(self):
        """Space calls at least ``min_call_interval`` seconds apart."""
        with self._rate_limit_lock:
            elapsed = time.time() - self._last_api_call
            sleep_time = max(0.0, self._min_call_interval - elapsed)
            self._last_api_call = time.time() + sleep_time
        if sleep_time > 0:
            time.sleep(sleep_time)

    def _call_openai_compatible(self, prompt: str, system_prompt: str, api_key: str,
                                base_url: Optional[str], model: str) -> Optional[str]:
        from openai import OpenAI

        client = OpenAI(api_key=api_key, base_url=base_url, timeout=self.timeout)
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=0.7,
        )
        return response.choices[0].message.content

    def _call_deepseek(self, prompt: str, system_prompt: str = "") -> Optional[str]:
        if not self.deepseek_api_key:
            logger.error("DeepSeek API key not configured")
            return None
        return self._call_openai_compatible(
            prompt, system_prompt, self.deepseek_api_key, "https://api.deepseek.com", self.model_name
        )

    def _call_openai(self, prompt: str, system_prompt: str = "") -> Optional[str]:
        if not self.openai_api_key:
            logger.error("OpenAI API key not configured")
            return None
        model = self.model_name if self.model_name != "deepseek-chat" else "gpt-4o-mini"
        return self._call_openai_compatible(prompt, system_prompt, self.openai_api_key, None, model)

    def _call_anthropic(self, prompt: str, system_prompt: str = "") -> Optional[str]:
        import anthropic

        if not self.anthropic_api_key:
            logger.error("Anthropic API key not configured")
            return None
        client = anthropic.Anthropic(api_key=self.anthropic_api_key, timeout=self.timeout)
        model = self.model_name if self.model_name != "deepseek-chat" else "claude-3-5-haiku-latest"
        response = client.messages.create(
            model=model,
            max_tokens=1024,
            system=system_prompt or "You are a helpful assistant.",
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text

    def generate(self, prompt: str, system_prompt: str = "") -> str:
        """Return generated text or raise ``TextGenerationError``."""
        callers = {
            "deepseek": self._call_deepseek,
            "openai": self._call_openai,
            "anthropic": self._call_anthropic,
        }
        caller = callers.get(self.provider)
        if caller is None:
            logger.error(f"Unknown LLM provider: {self.provider}")
            raise TextGenerationError()

        self._rate_limit()
        try:
            text = caller(prompt, system_prompt)
        except Exception as e:
            logger.error(f"{self.provider} API error: {e}")
            raise TextGenerationError() from e
        if not text:
            raise TextGenerationError()
        return text

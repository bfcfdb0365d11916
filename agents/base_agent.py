import logging
from typing import Any, List, Dict, Optional

import requests

from backend.config import Settings
from backend.errors import ProviderError


logger = logging.getLogger(__name__)


class BaseAgent:
    """Thin client for an OpenRouter-compatible chat-completions endpoint.

    One request per call. Failures of any kind surface as ``ProviderError``;
    retrying is left to the caller.
    """

    def __init__(self, name: str, role: str, system_prompt: str, settings: Settings, schema: Optional[Dict] = None):
        self.name = name
        self.role = role
        self.system_prompt = system_prompt
        self.settings = settings
        self.schema = schema

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
            # Optional but recommended by OpenRouter
            "HTTP-Referer": self.settings.http_referer,
            "X-Title": self.settings.app_title,
        }

    def _response_format(self) -> Optional[Dict[str, Any]]:
        if self.schema is None:
            return None
        return {
            "type": "json_schema",
            "json_schema": {"name": self.name, "strict": True, "schema": self.schema},
        }

    def call_openrouter(self, messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
        if not self.settings.api_key:
            raise ProviderError("provider credential is not configured")

        data: Dict[str, Any] = {
            "model": model or self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
        }
        response_format = self._response_format()
        if response_format is not None:
            data["response_format"] = response_format

        logger.debug("call_openrouter: agent=%s model=%s messages=%d", self.name, data["model"], len(messages))
        try:
            response = requests.post(
                self.settings.base_url,
                headers=self._headers(),
                json=data,
                timeout=self.settings.timeout,
            )
        except requests.Timeout as exc:
            raise ProviderError(f"provider timed out after {self.settings.timeout:g}s") from exc
        except requests.RequestException as exc:
            raise ProviderError(f"provider request failed: {exc}") from exc

        if response.status_code != 200:
            raise ProviderError(f"OpenRouter API Error: {response.status_code} - {response.text[:200]}")

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderError(f"unexpected provider response shape: {exc!r}") from exc
        if not isinstance(content, str):
            raise ProviderError("provider reply has no text content")
        logger.debug("call_openrouter: reply length=%d", len(content))
        return content

    def build_messages(self, user_message: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": user_message},
        ]

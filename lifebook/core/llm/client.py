"""OpenAI-backed completion client.

Calls are not retried. Any failure (no key, network, quota, bad payload)
returns the caller-supplied fallback and is logged; nothing is raised past
this module.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_TRAILING_COMMA = re.compile(r",\s*([\}\]])")


def parse_json_payload(raw_text: Optional[str]) -> Any:
    """Extract the JSON value from an LLM reply; ``None`` when there is none."""
    if not raw_text:
        return None
    match = _FENCE.search(raw_text)
    text = match.group(1) if match else raw_text
    starts = [index for index in (text.find("{"), text.find("[")) if index != -1]
    if not starts:
        return None
    end = max(text.rfind("}"), text.rfind("]"))
    if end == -1:
        return None
    snippet = _TRAILING_COMMA.sub(r"\1", text[min(starts) : end + 1])
    try:
        return json.loads(snippet)
    except json.JSONDecodeError as exc:
        logger.warning("Could not parse JSON from LLM reply: %s", exc)
        return None


class LLMClient:
    def __init__(self, api_key: str = "", model: str = "gpt-4o-mini", timeout: float = 30.0) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: Optional[OpenAI] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        fallback: str = "",
        temperature: float = 0.7,
        max_tokens: int = 800,
        model: Optional[str] = None,
    ) -> str:
        """Send ``messages`` as-is; return the reply text or ``fallback``."""
        if not self.enabled:
            logger.info("LLM disabled (no OPENAI_API_KEY); returning fallback")
            return fallback
        try:
            response = self._get_client().chat.completions.create(
                model=model or self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            logger.warning("LLM call failed: %s", exc)
            return fallback
        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        return content or fallback

    def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        fallback: str = "",
        temperature: float = 0.7,
        max_tokens: int = 800,
        model: Optional[str] = None,
    ) -> str:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})
        return self.chat(
            messages, fallback=fallback, temperature=temperature, max_tokens=max_tokens, model=model
        )

    def complete_json(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        fallback: Any = None,
        temperature: float = 0.4,
        max_tokens: int = 1000,
        model: Optional[str] = None,
    ) -> Any:
        text = self.complete(
            prompt, system=system, fallback="", temperature=temperature, max_tokens=max_tokens, model=model
        )
        parsed = parse_json_payload(text)
        return fallback if parsed is None else parsed

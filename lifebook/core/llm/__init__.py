"""Generic text-completion channel to the hosted LLM."""

from __future__ import annotations

from flask import Flask, current_app

from lifebook.core.llm.client import LLMClient, parse_json_payload

EXTENSION_KEY = "lifebook_llm"

__all__ = ["LLMClient", "get_llm", "init_llm", "parse_json_payload"]


def init_llm(app: Flask) -> LLMClient:
    client = LLMClient(
        api_key=app.config.get("OPENAI_API_KEY", ""),
        model=app.config.get("OPENAI_MODEL", "gpt-4o-mini"),
        timeout=app.config.get("OPENAI_TIMEOUT_SECONDS", 30.0),
    )
    app.extensions[EXTENSION_KEY] = client
    return client


def get_llm() -> LLMClient:
    return current_app.extensions[EXTENSION_KEY]

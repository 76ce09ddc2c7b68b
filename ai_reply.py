"""
Drafts a reply to an inquiry with Gemini.

Talks to the Gemini REST API directly through httpx. Nothing here reads or
writes submissions; a failure only affects the drafted text.
"""

import logging
from typing import Optional

import httpx

from errors import UpstreamUnavailable

log = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

PROMPT_TEMPLATE = """
You are a helpful support agent for a Contact Form application.
Draft a polite, professional, and concise email reply to the following user inquiry.

User Name: {name}
Subject: {subject}
Message: "{message}"

The reply should:
1. Thank them for contacting us.
2. Address their specific message.
3. Be ready to copy-paste (no placeholders).
"""


def build_prompt(name: str, subject: str, message: str) -> str:
    return PROMPT_TEMPLATE.format(name=name, subject=subject, message=message)


class AiReplyBridge:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash-lite",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def draft_reply(self, name: str, subject: str, message: str) -> str:
        """Return the generated reply text verbatim."""
        if not self.configured:
            raise UpstreamUnavailable("missing credential")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": build_prompt(name, subject, message)}]}],
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.post(
                    GEMINI_URL.format(model=self.model),
                    params={"key": self.api_key},
                    json=payload,
                )
            r.raise_for_status()
            j = r.json()
        except (httpx.HTTPError, ValueError) as e:
            log.exception("Gemini request failed")
            raise UpstreamUnavailable("provider call failed") from e

        text = ((((j.get("candidates") or [{}])[0].get("content") or {}).get("parts") or [{}])[0].get("text") or "")
        if not text.strip():
            log.error("Gemini returned no text for model %s", self.model)
            raise UpstreamUnavailable("provider returned no text")
        return text

import os
from typing import Optional

from openai import OpenAI

from .base import BaseTranslator


class ChatGPTTranslator(BaseTranslator):
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        super().__init__(model, temperature)
        if client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise RuntimeError("Set OPENAI_API_KEY environment variable.")
            client = OpenAI(api_key=api_key)
        self.client = client

    def translate(self, text: str, target_lang: str, source_lang: Optional[str] = None) -> str:
        if not text.strip():
            return text

        sys = (
            "You are a professional translator of presentation slides. "
            f"Translate from {source_lang or 'the source language'} to {target_lang}. "
            "Preserve technical terms, numbers, math, and code blocks. "
            "Keep bullet-like brevity for short lines; keep paragraph flow for long text. "
            "Leave personal names exactly as written; do not translate or transliterate them. "
            "Do NOT add extra commentary. Return only the translation."
        )

        request_args = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": sys},
                {"role": "user", "content": text},
            ],
        }
        if self.temperature is not None:
            request_args["temperature"] = self.temperature

        resp = self.client.chat.completions.create(**request_args)
        out = (resp.choices[0].message.content or "").strip()
        if not out:
            raise ValueError(f"Empty translation returned for {text[:40]!r}")
        return out

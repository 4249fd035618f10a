"""Gemini REST client for structured JSON and free-text generation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from healthguard.config import Settings


T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


REPAIR_SUFFIX = (
    "\n\nIMPORTANT: Return ONLY a single JSON object. No markdown. No code fences. "
    "Do not add any extra keys. Ensure types and allowed values match the schema."
)


def _extract_text_from_response(payload: dict[str, Any]) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        raise ValueError("Gemini response missing candidates")

    content = (candidates[0].get("content") or {})
    parts = content.get("parts") or []
    texts: list[str] = []
    for part in parts:
        text = part.get("text")
        if isinstance(text, str) and text.strip():
            texts.append(text)
    if not texts:
        raise ValueError("Gemini response missing text parts")
    return "\n".join(texts).strip()


def _strip_code_fences(text: str) -> str:
    value = text.strip()
    if value.startswith("```"):
        lines = value.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].startswith("```"):
            lines = lines[:-1]
        value = "\n".join(lines).strip()
    return value


def _extract_json_string(text: str) -> str:
    candidate = _strip_code_fences(text)
    try:
        orjson.loads(candidate)
        return candidate
    except orjson.JSONDecodeError:
        pass

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start >= 0 and end > start:
        maybe = candidate[start : end + 1].strip()
        try:
            orjson.loads(maybe)
        except orjson.JSONDecodeError as exc:
            raise ValueError(f"Could not parse JSON from model output: {exc}") from exc
        return maybe

    raise ValueError("Could not extract valid JSON from model output")


@dataclass(frozen=True)
class GeminiResult:
    text: str
    latency_ms: int


class GeminiClient:
    """Minimal REST client for Gemini generateContent.

    Every request is bounded by ``oracle_timeout_seconds``; a timeout surfaces
    as an ``httpx.HTTPError`` like any other transport failure. A missing API
    key is reported as a failed generation, not at construction.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.transport = transport

    def _request(self, prompt: str, api_key: str, json_output: bool) -> GeminiResult:
        url = (
            f"{self.settings.gemini_api_base_url}/models/"
            f"{self.settings.gemini_model_id}:generateContent"
        )
        generation_config: dict[str, Any] = {
            "temperature": self.settings.gemini_temperature,
            "maxOutputTokens": self.settings.gemini_max_output_tokens,
        }
        if json_output:
            generation_config["responseMimeType"] = "application/json"
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        start = time.time()
        with httpx.Client(
            timeout=self.settings.oracle_timeout_seconds, transport=self.transport
        ) as client:
            response = client.post(url, params={"key": api_key}, json=body)
            response.raise_for_status()
            payload = response.json()

        latency_ms = int((time.time() - start) * 1000)
        return GeminiResult(text=_extract_text_from_response(payload), latency_ms=latency_ms)

    def _generate(
        self,
        prompt: str,
        parse: Callable[[str], R],
        json_output: bool,
        repair_suffix: str = "",
    ) -> tuple[Optional[R], int, int, str | None]:
        try:
            api_key = self.settings.require_google_api_key()
        except ValueError as exc:
            return None, 0, 0, str(exc)

        total_latency = 0
        last_error: str | None = None
        attempts = max(1, self.settings.oracle_max_retries)

        for attempt in range(1, attempts + 1):
            suffix = repair_suffix if attempt > 1 else ""
            try:
                result = self._request(prompt + suffix, api_key, json_output=json_output)
                total_latency += result.latency_ms
                return parse(result.text), total_latency, attempt, None
            except (httpx.HTTPError, ValidationError, ValueError) as exc:
                last_error = str(exc)
                if attempt < attempts:
                    time.sleep(self.settings.oracle_retry_sleep_seconds)

        return None, total_latency, attempts, last_error

    def generate_structured(self, prompt: str, schema: type[T]) -> tuple[Optional[T], int, int, str | None]:
        """Generate JSON and validate it against ``schema``.

        Retries append a repair instruction. Returns (output, total_latency_ms,
        attempts, error_message).
        """

        def parse(text: str) -> T:
            return schema.model_validate_json(_extract_json_string(text))

        return self._generate(prompt, parse, json_output=True, repair_suffix=REPAIR_SUFFIX)

    def generate_text(self, prompt: str) -> tuple[Optional[str], int, int, str | None]:
        """Generate free text. Same return shape as ``generate_structured``."""
        return self._generate(prompt, lambda text: text, json_output=False)

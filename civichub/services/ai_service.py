"""Structured-output generation over Gemini or Ollama."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from civichub.core.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("gemini", "ollama")


class AIServiceError(Exception):
    """Raised when structured generation fails."""


def generate_structured(provider: str, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Ask ``provider`` for a JSON object matching ``schema``.

    Retries once with a correction prompt when parsing or schema validation
    fails. Transport errors are not retried.
    """
    provider_name = provider.strip().lower()
    if provider_name not in SUPPORTED_PROVIDERS:
        raise AIServiceError(f"Unsupported provider '{provider}'. Use 'gemini' or 'ollama'.")

    request_prompt = _build_prompt(prompt, schema)
    last_error: Exception | None = None

    for attempt in range(2):
        raw = _call_provider(provider_name, request_prompt, schema)
        try:
            parsed = _parse_provider_output(raw)
            validate_against_schema(parsed, schema)
            return parsed
        except ValueError as exc:
            last_error = exc
            logger.info("%s returned invalid output (attempt %s): %s", provider_name, attempt + 1, exc)
            request_prompt = _build_correction_prompt(prompt, schema, bad_output=raw, error=exc)

    raise AIServiceError(
        f"{provider_name} failed to return valid structured JSON after 2 attempts: {last_error}"
    )


def _call_provider(provider: str, prompt: str, schema: dict[str, Any]) -> str | dict[str, Any]:
    if provider == "gemini":
        return _call_gemini(prompt, schema)
    return _call_ollama(prompt, schema)


def _call_gemini(prompt: str, schema: dict[str, Any]) -> str | dict[str, Any]:
    if not settings.gemini_api_key:
        raise AIServiceError("GEMINI_API_KEY is not configured")

    try:
        from google import genai
        from google.genai import types
    except ImportError as exc:
        raise AIServiceError("Gemini SDK is not installed. Add 'google-genai' to dependencies.") from exc

    client = genai.Client(api_key=settings.gemini_api_key)
    try:
        response = client.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
    except Exception as exc:  # noqa: BLE001 - SDK raises several unrelated error types
        raise AIServiceError(f"Gemini request failed: {exc}") from exc

    parsed = getattr(response, "parsed", None)
    if isinstance(parsed, dict):
        return parsed

    text = getattr(response, "text", None)
    if not text:
        raise AIServiceError("Gemini returned an empty response")
    return text


def _call_ollama(prompt: str, schema: dict[str, Any]) -> str | dict[str, Any]:
    url = settings.ollama_base_url.rstrip("/") + "/api/generate"
    payload = {
        "model": settings.ollama_model,
        "prompt": prompt,
        "stream": False,
        "format": schema,
    }

    try:
        response = httpx.post(url, json=payload, timeout=settings.ai_timeout_seconds)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise AIServiceError(f"Ollama request failed: {exc}") from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise AIServiceError(f"Ollama returned a non-JSON body: {response.text[:200]!r}") from exc
    if not isinstance(data, dict) or "response" not in data:
        raise AIServiceError("Ollama response missing 'response' field")
    return data["response"]


def _parse_provider_output(raw: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"Provider returned non-string/non-object output: {type(raw).__name__}")

    try:
        parsed = json.loads(_strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc.msg}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("JSON must be an object")
    return parsed


def _strip_code_fences(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    lines = stripped.splitlines()
    if len(lines) >= 2 and lines[-1].strip() == "```":
        return "\n".join(lines[1:-1]).strip()
    return stripped


def _build_prompt(prompt: str, schema: dict[str, Any]) -> str:
    return (
        f"{prompt}\n\n"
        "Return only JSON that matches this schema exactly:\n"
        f"{json.dumps(schema, ensure_ascii=True)}"
    )


def _build_correction_prompt(
    prompt: str,
    schema: dict[str, Any],
    bad_output: str | dict[str, Any],
    error: Exception,
) -> str:
    return (
        "Your previous output was invalid. Fix it and return only valid JSON.\n\n"
        f"Validation error:\n{error}\n\n"
        f"Previous invalid output:\n{bad_output}\n\n"
        + _build_prompt(prompt, schema)
    )


def validate_against_schema(data: Any, schema: dict[str, Any], path: str = "$") -> None:
    """Check ``data`` against the subset of JSON schema we send to providers.

    Supports ``type``, ``required``, ``properties``, ``items`` and ``enum``.
    Raises ValueError on the first mismatch.
    """
    schema_type = schema.get("type")
    if schema_type and not _is_type(data, schema_type):
        raise ValueError(f"{path}: expected type '{schema_type}'")

    allowed = schema.get("enum")
    if allowed is not None and data not in allowed:
        raise ValueError(f"{path}: {data!r} is not one of {allowed}")

    if schema_type == "object":
        for key in schema.get("required", []):
            if key not in data:
                raise ValueError(f"{path}: missing required field '{key}'")
        properties = schema.get("properties", {})
        for key, value in data.items():
            if key in properties:
                validate_against_schema(value, properties[key], f"{path}.{key}")

    elif schema_type == "array":
        item_schema = schema.get("items")
        if item_schema:
            for idx, item in enumerate(data):
                validate_against_schema(item, item_schema, f"{path}[{idx}]")


def _is_type(value: Any, schema_type: str) -> bool:
    if schema_type == "string":
        return isinstance(value, str)
    if schema_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if schema_type == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if schema_type == "boolean":
        return isinstance(value, bool)
    if schema_type == "object":
        return isinstance(value, dict)
    if schema_type == "array":
        return isinstance(value, list)
    if schema_type == "null":
        return value is None
    return True

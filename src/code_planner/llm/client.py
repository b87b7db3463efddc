# src/code_planner/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings
from ..core.ports import ChatMessage
from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {
        "AuthenticationError",
        "PermissionDeniedError",
        "UnauthorizedError",
    }


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"RateLimitError", "TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return exc.__class__.__name__ in {
        "APIConnectionError",
        "APITimeoutError",
        "ConnectTimeout",
        "ReadTimeout",
        "WriteTimeout",
    }


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404 (unknown model)
    return isinstance(exc, openai.NotFoundError) or exc.__class__.__name__ == "NotFoundError"


def describe_llm_error(err: Exception) -> str:
    """Short human-readable text for an SDK/transport exception."""
    if _is_auth_error(err):
        return "LLM authentication failed. Check your API key (OPENAI_API_KEY)."
    if _is_rate_limit_error(err):
        return "LLM is rate-limited. Try again later."
    if _is_not_found_error(err):
        return f"LLM model not available: {err}"
    if _is_connection_error(err):
        return "LLM network/timeout error. Try again later."
    return str(err).strip() or err.__class__.__name__


def friendly_llm_error_message(err: Exception) -> str:
    if isinstance(err, ConfigurationError):
        return ConfigurationError.public_message
    msg = str(err).strip()
    return msg or "LLM error."


class OpenAILLMClient:
    """
    Chat-completion client on the OpenAI SDK.

    - No secrets required at construction; the key is checked on the first call
      and a missing key raises ConfigurationError.
    - One attempt per call: SDK retries are disabled.
    - Any SDK/transport failure is re-raised as UpstreamError.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._client: AsyncOpenAI | None = None

    @property
    def model(self) -> str:
        return self._settings.llm_model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client

        api_key = getattr(self._settings, "openai_api_key", None)
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("OpenAI API key not configured")

        kwargs: dict[str, Any] = {"api_key": str(api_key).strip(), "max_retries": 0}

        base_url = getattr(self._settings, "openai_base_url", None)
        if base_url and str(base_url).strip():
            kwargs["base_url"] = str(base_url).strip()

        timeout_s: Optional[float] = getattr(self._settings, "llm_timeout_seconds", None)
        if timeout_s is not None:
            kwargs["timeout"] = httpx.Timeout(timeout_s, connect=min(timeout_s, 10.0))

        self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def complete(
            self,
            messages: list[ChatMessage],
            *,
            max_tokens: int | None = None,
            temperature: float | None = None,
    ) -> str:
        client = self._get_client()

        params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self._settings.llm_temperature if temperature is None else temperature,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens

        t0 = time.monotonic()
        try:
            completion = await client.chat.completions.create(**params)
        except Exception as e:
            msg = describe_llm_error(e)
            logger.info("LLM: call failed model=%s (%s): %s", self.model, e.__class__.__name__, msg)
            raise UpstreamError(msg) from e

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise UpstreamError("Malformed completion returned by the model") from e

        logger.debug(
            "LLM: completed model=%s in %.2fs len=%s",
            self.model,
            time.monotonic() - t0,
            len(content or ""),
        )
        return (content or "").strip()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

"""LLM Service - Abstraction layer for the external assessment capability.

This module provides a unified interface for calling different LLM providers
(Gemini, OpenAI) with consistent error handling and response formatting.

Interface Contract:
- call(prompt) returns str (raw text)
- call_async(prompt) is the awaitable variant used by the matching engine
- All methods raise LLMServiceError (or a subclass) on failure
- Callers should not depend on specific LLM provider details

A single client instance is shared per process through LLMService and is
created lazily on first use; services receive it at construction.

Blocking provider calls run on a module-level thread pool rather than the
event loop's default executor. An abandoned call keeps its worker until the
client's own timeout fires, but never holds up asyncio.run() on exit.
"""

from __future__ import annotations

import asyncio
import functools
import os
from concurrent.futures import ThreadPoolExecutor
from abc import ABC, abstractmethod
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
import openai
from openai import OpenAI

from config import (
    DEFAULT_MODEL,
    LLM_MAX_WORKERS,
    LLM_PROVIDER,
    LLM_TIMEOUT_SECONDS,
    OPENAI_MODEL,
)

_EXECUTOR = ThreadPoolExecutor(max_workers=LLM_MAX_WORKERS, thread_name_prefix="llm-call")


class LLMServiceError(Exception):
    """Raised when LLM call fails."""
    pass


class LLMTimeoutError(LLMServiceError):
    """The provider did not answer in time."""
    pass


class LLMAuthError(LLMServiceError):
    """Missing or rejected credentials."""
    pass


class LLMRateLimitError(LLMServiceError):
    """The provider throttled the request."""
    pass


class LLMResponseError(LLMServiceError):
    """The provider answered with nothing usable."""
    pass


class BaseLLMService(ABC):
    """Abstract base class for LLM services."""

    @abstractmethod
    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call the LLM with a prompt.

        Args:
            prompt: The prompt to send to the LLM
            json_mode: If True, expect JSON response

        Returns:
            str: The LLM response text

        Raises:
            LLMServiceError: If the call fails
        """
        pass

    async def call_async(self, prompt: str, *, json_mode: bool = False) -> str:
        """Awaitable call. Runs the blocking client on the shared worker pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            _EXECUTOR, functools.partial(self.call, prompt, json_mode=json_mode)
        )


def _map_google_error(e: Exception) -> LLMServiceError:
    if isinstance(e, (google_exceptions.DeadlineExceeded, TimeoutError)):
        return LLMTimeoutError(f"Gemini call timed out: {e}")
    if isinstance(e, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return LLMAuthError(f"Gemini rejected credentials: {e}")
    if isinstance(e, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)):
        return LLMRateLimitError(f"Gemini rate limit: {e}")
    return LLMServiceError(f"Gemini call failed: {e}")


def _map_openai_error(e: Exception) -> LLMServiceError:
    if isinstance(e, (openai.APITimeoutError, TimeoutError)):
        return LLMTimeoutError(f"OpenAI call timed out: {e}")
    if isinstance(e, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return LLMAuthError(f"OpenAI rejected credentials: {e}")
    if isinstance(e, openai.RateLimitError):
        return LLMRateLimitError(f"OpenAI rate limit: {e}")
    return LLMServiceError(f"OpenAI call failed: {e}")


def _response_text(response: Any) -> str:
    # response.text raises ValueError when the candidate was blocked or empty
    try:
        text = response.text
    except ValueError as e:
        raise LLMResponseError(f"Gemini returned no text: {e}") from e
    if not text or not text.strip():
        raise LLMResponseError("Gemini returned an empty response")
    return text


class GeminiService(BaseLLMService):
    """Google Gemini LLM service implementation."""

    def __init__(self, model: str = DEFAULT_MODEL, timeout: float = LLM_TIMEOUT_SECONDS):
        self.model = model
        self.timeout = timeout
        self._configured = False

    def _configure(self) -> None:
        """Configure Gemini API (lazy initialization)."""
        if self._configured:
            return
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise LLMAuthError("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")
        genai.configure(api_key=api_key)
        self._configured = True

    def _generation_config(self, json_mode: bool):
        if not json_mode:
            return None
        return genai.GenerationConfig(response_mime_type="application/json")

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call Gemini model."""
        self._configure()
        try:
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(
                prompt,
                generation_config=self._generation_config(json_mode),
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            raise _map_google_error(e) from e
        return _response_text(response)


class OpenAIService(BaseLLMService):
    """OpenAI LLM service implementation."""

    def __init__(self, model: str = OPENAI_MODEL, timeout: float = LLM_TIMEOUT_SECONDS):
        self.model = model
        self.timeout = timeout
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMAuthError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call OpenAI model."""
        client = self._get_client()
        try:
            response_format = {"type": "json_object"} if json_mode else openai.NOT_GIVEN
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format=response_format,
            )
        except Exception as e:
            raise _map_openai_error(e) from e
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise LLMResponseError("OpenAI returned an empty response")
        return content


# Default service instance (can be swapped for testing)
class LLMService:
    """Facade for LLM services with provider switching."""

    _instance: BaseLLMService | None = None

    @classmethod
    def get_instance(cls) -> BaseLLMService:
        """Get the configured LLM service instance."""
        if cls._instance is None:
            if LLM_PROVIDER == "openai":
                cls._instance = OpenAIService()
            else:
                cls._instance = GeminiService()
        return cls._instance

    @classmethod
    def set_instance(cls, service: BaseLLMService) -> None:
        """Set a custom LLM service (useful for testing)."""
        cls._instance = service

    @classmethod
    def reset(cls) -> None:
        """Reset to default service."""
        cls._instance = None


class OfflineLLMService(BaseLLMService):
    """Stand-in client that always fails, forcing every caller onto its fallback."""

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        raise LLMServiceError("External assessment disabled (offline mode)")


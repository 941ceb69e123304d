"""
podscribe.llm.client - LLM backend abstraction using litellm.

Provides a unified interface for Gemini, OpenAI, Claude, and Ollama for
both text prompts (highlights, summary) and audio prompts (chunk
transcription).
"""

from __future__ import annotations

import base64
import time
from typing import Any


class LLMClient:
    """LLM client wrapper with retry logic for text and a single-shot audio call."""

    def __init__(
        self,
        backend: str = "gemini",
        model: str = "gemini-2.0-flash",
        api_key: str | None = None,
        timeout: int = 300,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ) -> None:
        self.backend = backend
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._token_usage = {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}

    def _get_model_string(self) -> str:
        """Get the model string for litellm based on backend."""
        if self.backend == "gemini":
            return f"gemini/{self.model}"
        elif self.backend == "ollama":
            return f"ollama/{self.model}"
        elif self.backend == "claude":
            return f"anthropic/{self.model}"
        elif self.backend == "openai":
            return self.model
        return self.model

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"timeout": self.timeout}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.backend == "ollama":
            kwargs["api_base"] = "http://localhost:11434"
        return kwargs

    def _record_usage(self, response: Any) -> None:
        usage = getattr(response, "usage", None)
        if usage:
            self._token_usage["prompt_tokens"] += getattr(usage, "prompt_tokens", 0) or 0
            self._token_usage["completion_tokens"] += getattr(usage, "completion_tokens", 0) or 0
            self._token_usage["total_tokens"] += getattr(usage, "total_tokens", 0) or 0

    def _extract_content(self, response: Any) -> str:
        from podscribe.exceptions import LLMResponseError

        choices = getattr(response, "choices", [])
        if not choices:
            raise LLMResponseError("Empty response from LLM")

        message = getattr(choices[0], "message", None)
        if message is None:
            raise LLMResponseError("No message in LLM response")

        content = getattr(message, "content", None)
        if content is None:
            raise LLMResponseError("No content in LLM message")

        return content

    def complete(
        self,
        prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        console=None,
    ) -> str:
        """Send prompt to LLM and get completion with retry logic.

        Args:
            prompt: The prompt string
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature
            console: Optional rich console for output

        Returns:
            LLM response text

        Raises:
            LLMError: If LLM request fails after all retries
        """
        from podscribe.exceptions import LLMError, LLMResponseError

        try:
            import litellm
        except ImportError as e:
            raise LLMError("litellm not installed. Install with: pip install litellm") from e

        litellm.telemetry = False

        model = self._get_model_string()
        last_error = None

        for attempt in range(self.max_retries):
            if console and attempt > 0:
                console.print(f"[yellow]  Retry {attempt + 1}/{self.max_retries}...[/yellow]")

            try:
                response = litellm.completion(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=max_tokens,
                    temperature=temperature,
                    **self._request_kwargs(),
                )
                self._record_usage(response)
                return self._extract_content(response)

            except LLMResponseError:
                raise
            except Exception as e:
                last_error = e
                error_str = str(e).lower()

                if "rate limit" in error_str:
                    if console:
                        console.print("[yellow]  Rate limited, waiting...[/yellow]")
                    time.sleep(self.retry_delay * 2)
                    continue

                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)
                else:
                    raise LLMError(
                        f"LLM request failed after {self.max_retries} retries: {last_error}"
                    ) from last_error

        raise LLMError(f"LLM request failed: {last_error}")

    async def complete_with_audio(
        self,
        audio: bytes,
        mime_type: str,
        prompt: str,
        temperature: float = 0.2,
    ) -> str:
        """Send one audio payload plus instruction and return the raw text.

        No retries here; callers own their retry policy.

        Args:
            audio: Raw audio bytes
            mime_type: MIME type such as audio/mp3
            prompt: Instruction text
            temperature: Sampling temperature

        Returns:
            Raw response text

        Raises:
            LLMError: If litellm is missing
            LLMResponseError: If the response has no text content
        """
        from podscribe.exceptions import LLMError

        try:
            import litellm
        except ImportError as e:
            raise LLMError("litellm not installed. Install with: pip install litellm") from e

        litellm.telemetry = False

        audio_format = mime_type.split("/")[-1]
        encoded = base64.b64encode(audio).decode("ascii")

        response = await litellm.acompletion(
            model=self._get_model_string(),
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_audio",
                            "input_audio": {"data": encoded, "format": audio_format},
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
            temperature=temperature,
            **self._request_kwargs(),
        )
        self._record_usage(response)
        return self._extract_content(response)

    def get_token_usage(self) -> dict[str, int]:
        """Get cumulative token usage."""
        return self._token_usage.copy()


def create_client_from_config(config: Any, purpose: str = "text") -> LLMClient:
    """Create LLM client from PodscribeConfig.

    Args:
        config: PodscribeConfig instance
        purpose: "text" for highlights/summary, "transcription" for audio chunks

    Returns:
        Configured LLMClient
    """
    model = config.transcription_model if purpose == "transcription" else config.text_model
    return LLMClient(
        backend=config.llm_backend,
        model=model,
        api_key=config.api_key,
    )

from anthropic import AsyncAnthropic, APIStatusError, APIError, APIConnectionError, APITimeoutError
from typing import Optional, Dict, List, Any
import asyncio
import random
import httpx
from pathforge.core.config import settings
from pathforge.core.exceptions import AIServiceError
from pathforge.core.logging_config import logger

# Retry configuration - loaded from settings
MAX_RETRIES = settings.CLAUDE_MAX_RETRIES
BASE_DELAY = settings.CLAUDE_RETRY_BASE_DELAY
MAX_DELAY = settings.CLAUDE_RETRY_MAX_DELAY
REQUEST_TIMEOUT = float(settings.CLAUDE_REQUEST_TIMEOUT)
CONNECT_TIMEOUT = float(settings.CLAUDE_CONNECT_TIMEOUT)
RETRYABLE_ERRORS = ['overloaded_error', 'rate_limit_error', 'server_error']


class ClaudeClient:
    """
    Thin wrapper around the Anthropic async client.

    Every caller in PathForge has a template fallback, so the client is
    optional: check ``is_configured()`` before calling ``generate``.
    """

    def __init__(self):
        self._async_client: Optional[AsyncAnthropic] = None
        self.haiku_model = settings.CLAUDE_HAIKU_MODEL
        self.sonnet_model = settings.CLAUDE_SONNET_MODEL

    def is_configured(self) -> bool:
        return bool(settings.ANTHROPIC_API_KEY) and not settings.USE_MOCK_CLAUDE

    @property
    def async_client(self) -> AsyncAnthropic:
        """Created on first use so a missing key never breaks startup"""
        if self._async_client is None:
            client_kwargs: Dict[str, Any] = {"api_key": settings.ANTHROPIC_API_KEY}

            if settings.ANTHROPIC_BASE_URL and settings.ANTHROPIC_BASE_URL.strip():
                client_kwargs["base_url"] = settings.ANTHROPIC_BASE_URL.strip()
                logger.info(f"Using custom Claude API base URL: {settings.ANTHROPIC_BASE_URL}")

            client_kwargs["timeout"] = httpx.Timeout(
                connect=CONNECT_TIMEOUT,
                read=REQUEST_TIMEOUT,
                write=REQUEST_TIMEOUT,
                pool=REQUEST_TIMEOUT
            )

            self._async_client = AsyncAnthropic(**client_kwargs)
            logger.info(f"Claude client initialized: timeout={REQUEST_TIMEOUT}s, models=[{self.haiku_model}, {self.sonnet_model}]")
        return self._async_client

    def _is_retryable_error(self, error: Exception) -> bool:
        """Overload, rate limit and network failures are worth another attempt"""
        if isinstance(error, (APIConnectionError, APITimeoutError)):
            logger.warning(f"Network error detected (retryable): {type(error).__name__}")
            return True

        if isinstance(error, (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError)):
            logger.warning(f"HTTPX network error detected (retryable): {type(error).__name__}")
            return True

        if isinstance(error, (APIStatusError, APIError)):
            if hasattr(error, 'body') and isinstance(error.body, dict):
                error_type = error.body.get('error', {}).get('type', '')
                return error_type in RETRYABLE_ERRORS
            if hasattr(error, 'status_code'):
                return error.status_code in [429, 500, 502, 503, 529]

        error_str = str(error).lower()
        network_errors = ['overload', 'rate_limit', '529', '503', 'capacity',
                          'connection', 'timeout', 'network']
        return any(err in error_str for err in network_errors)

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Exponential backoff with up to 25% jitter"""
        delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)
        jitter = delay * random.uniform(0, 0.25)
        return delay + jitter

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        model: str = "haiku",
        max_tokens: int = None,
        temperature: float = None,
        messages: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        """
        Generate a non-streaming response from Claude

        Args:
            prompt: User prompt
            system_prompt: System prompt
            model: "haiku" or "sonnet"
            max_tokens: Maximum tokens to generate
            temperature: Temperature for generation
            messages: Optional list of previous messages for conversation

        Returns:
            Dict with "content" plus model and token usage

        Raises:
            AIServiceError: the request failed after all retries
        """
        model_name = self.sonnet_model if model == "sonnet" else self.haiku_model

        messages = list(messages or [])
        messages.append({
            "role": "user",
            "content": prompt
        })

        if max_tokens is None:
            max_tokens = settings.CLAUDE_MAX_TOKENS
        if temperature is None:
            temperature = settings.CLAUDE_TEMPERATURE

        logger.info(f"Claude API: model={model_name}, max_tokens={max_tokens}, prompt_len={len(prompt)}")

        last_error = None
        for attempt in range(MAX_RETRIES + 1):
            try:
                response = await self.async_client.messages.create(
                    model=model_name,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system_prompt if system_prompt else "",
                    messages=messages
                )

                content = response.content[0].text if response.content else ""

                result = {
                    "content": content,
                    "model": model_name,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                    "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
                    "stop_reason": response.stop_reason,
                    "id": response.id
                }

                logger.info(f"Claude API response: id={response.id}, tokens={result['total_tokens']}, stop={response.stop_reason}")
                return result

            except Exception as e:
                last_error = e
                error_type = type(e).__name__
                if self._is_retryable_error(e) and attempt < MAX_RETRIES:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Claude API error [{error_type}] (attempt {attempt + 1}/{MAX_RETRIES + 1}), retrying in {delay:.1f}s...",
                        extra={
                            "event_type": "claude_api_retry",
                            "error_type": error_type,
                            "attempt": attempt + 1,
                            "retry_delay": delay
                        }
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"Claude API error (non-retryable or max retries exceeded): {error_type}: {e}",
                        extra={
                            "event_type": "claude_api_error",
                            "error_type": error_type,
                            "attempt": attempt + 1
                        }
                    )
                    raise AIServiceError(f"Claude API request failed: {error_type}") from e

        raise AIServiceError(f"Claude API request failed: {type(last_error).__name__}") from last_error


claude_client = ClaudeClient()

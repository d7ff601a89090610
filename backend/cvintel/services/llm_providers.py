"""
Generative-Text Providers - Prompt In, Structured JSON Out

The analysis pipeline treats the model as a typed function: every stage sends
a fixed system instruction plus a prompt and expects JSON matching a schema.
This module hides the vendor behind a small protocol so the pipeline and the
tests never touch an SDK directly.

Key Classes:
    - TextProvider: Protocol implemented by all providers
    - OpenAIProvider: OpenAI chat completions with JSON-schema output
    - MockTextProvider: Canned responses keyed by stage name, for tests

Client Lifecycle:
    get_default_provider() builds a single provider on first use from
    Settings. A missing API key raises ConfigurationError at that point.
"""

import copy
import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from openai import AsyncOpenAI, OpenAIError

from cvintel.config import get_settings
from cvintel.exceptions import ConfigurationError, ProviderError, ProviderResponseError
from cvintel.services.mock_responses import DEFAULT_MOCK_RESPONSES

logger = logging.getLogger(__name__)


@runtime_checkable
class TextProvider(Protocol):
    """
    Protocol defining the generative-text provider interface.

    All providers must implement:
    - generate_json(): prompt + JSON schema to parsed JSON
    - generate_text(): prompt to free text
    """

    async def generate_json(
        self, name: str, system: str, prompt: str, schema: Dict[str, Any]
    ) -> Any:
        """Return the model's answer parsed as JSON."""
        ...

    async def generate_text(self, name: str, system: str, prompt: str) -> str:
        """Return the model's answer as plain text."""
        ...


def parse_json_content(content: Optional[str]) -> Any:
    """
    Parse a model answer as JSON.

    Markdown code fences are stripped first. Empty or invalid content raises
    instead of degrading to an empty object.

    Raises:
        ProviderResponseError: If the content is empty or not valid JSON
    """
    if not content or not content.strip():
        raise ProviderResponseError("Provider returned an empty response")

    content = content.strip()

    # Handle markdown code blocks
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1])

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse provider response as JSON: {content[:100]}")
        raise ProviderResponseError(f"Provider returned malformed JSON: {e}") from e


class OpenAIProvider:
    """
    OpenAI chat completions provider.

    Attributes:
        api_key: OpenAI API key
        model: Chat model name
        temperature: Sampling temperature
        max_tokens: Completion token limit

    Example:
        >>> provider = OpenAIProvider(api_key="sk-...")
        >>> data = await provider.generate_json("parse", system, prompt, schema)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_tokens: int = 2000,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self):
        """Get or create async OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def _complete(self, system: str, prompt: str, **kwargs: Any) -> Optional[str]:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **kwargs,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise ProviderError(str(e)) from e

        return response.choices[0].message.content

    async def generate_json(
        self, name: str, system: str, prompt: str, schema: Dict[str, Any]
    ) -> Any:
        content = await self._complete(
            system,
            prompt,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": name, "schema": schema},
            },
        )
        return parse_json_content(content)

    async def generate_text(self, name: str, system: str, prompt: str) -> str:
        content = await self._complete(system, prompt)
        if not content or not content.strip():
            raise ProviderResponseError(f"Provider returned no text for '{name}'")
        return content.strip()


class MockTextProvider:
    """
    Deterministic provider returning canned responses.

    Responses are looked up by stage name. A value may be a payload (returned
    as a deep copy), a callable taking the prompt, or an exception instance
    to raise. Every call is recorded in ``calls`` as (name, prompt).

    Example:
        >>> provider = MockTextProvider({"parse_cv": {"skills": ["Python"]}})
        >>> await provider.generate_json("parse_cv", "system", "cv text", {})
        {'skills': ['Python']}
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[Tuple[str, str]] = []

    def _respond(self, name: str, prompt: str) -> Any:
        self.calls.append((name, prompt))
        if name not in self.responses:
            raise ProviderError(f"No mock response configured for '{name}'")

        response = self.responses[name]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(prompt)
        return copy.deepcopy(response)

    def called(self, name: str) -> int:
        """Number of calls made for a stage name."""
        return sum(1 for call_name, _ in self.calls if call_name == name)

    async def generate_json(
        self, name: str, system: str, prompt: str, schema: Dict[str, Any]
    ) -> Any:
        response = self._respond(name, prompt)
        if isinstance(response, str):
            return parse_json_content(response)
        return response

    async def generate_text(self, name: str, system: str, prompt: str) -> str:
        return str(self._respond(name, prompt))


def get_text_provider(
    provider_name: str = "openai",
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
    **kwargs: Any,
) -> TextProvider:
    """
    Factory function to create text provider instances.

    Args:
        provider_name: Provider type - "openai" or "mock"
        api_key: API key (required for OpenAI)
        model_name: Optional model name override
        **kwargs: Provider-specific arguments (temperature, max_tokens, responses).
            The mock provider answers from DEFAULT_MOCK_RESPONSES unless
            responses is given.

    Raises:
        ConfigurationError: If the provider needs credentials that are missing
        ValueError: If the provider is unknown
    """
    provider_name = provider_name.lower()

    if provider_name == "openai":
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is not configured. Please set it in your environment variables."
            )
        return OpenAIProvider(
            api_key=api_key,
            model=model_name or "gpt-4o-mini",
            temperature=kwargs.get("temperature", 0.2),
            max_tokens=kwargs.get("max_tokens", 2000),
        )

    elif provider_name == "mock":
        responses = kwargs.get("responses")
        return MockTextProvider(DEFAULT_MOCK_RESPONSES if responses is None else responses)

    else:
        raise ValueError(
            f"Unknown text provider: {provider_name}. Supported: openai, mock"
        )


# ==============================================================================
# Singleton Pattern for Dependency Injection
# ==============================================================================

_default_provider: Optional[TextProvider] = None


def get_default_provider() -> TextProvider:
    """
    Get the shared provider built from Settings (singleton pattern).

    Raises:
        ConfigurationError: On first use when credentials are absent
    """
    global _default_provider
    if _default_provider is None:
        settings = get_settings()
        _default_provider = get_text_provider(
            settings.llm_provider,
            api_key=settings.openai_api_key,
            model_name=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
        logger.info(f"Created singleton {settings.llm_provider} text provider")
    return _default_provider


def reset_default_provider() -> None:
    """Drop the shared provider so the next call rebuilds it from Settings."""
    global _default_provider
    _default_provider = None

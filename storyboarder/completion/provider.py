"""Completion provider abstraction and implementations."""

import os
import time
from abc import ABC, abstractmethod
from typing import Callable

import httpx

from ..config import Config, LLMConfig
from ..errors import ConfigurationError, ServiceError

# Status codes worth another attempt
RETRYABLE_STATUS_CODES = {408, 409, 429, 500, 502, 503, 504}


class CompletionProvider(ABC):
    """Abstract base class for completion providers."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send a prompt and return the raw reply text.

        Args:
            prompt: The fully composed user prompt

        Returns:
            The reply text, verbatim
        """
        pass


class MockCompletionProvider(CompletionProvider):
    """Mock provider that returns a canned storyboard reply.

    Lets the whole pipeline run without a network connection or API key.
    """

    def __init__(self, config: LLMConfig, reply: str | None = None):
        super().__init__(config)
        self.reply = reply if reply is not None else MOCK_REPLY
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        """Record the prompt and return the canned reply."""
        self.prompts.append(prompt)
        return self.reply


class OpenAICompletionProvider(CompletionProvider):
    """Provider calling an OpenAI-compatible chat completions endpoint.

    A single POST per call. Transport failures, 429 and 5xx responses are
    retried with exponential backoff up to ``config.max_retries`` times.
    """

    def __init__(
        self,
        config: LLMConfig,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the provider.

        Args:
            config: LLM configuration
            transport: Optional httpx transport (tests pass a MockTransport)
            sleep: Function used to wait between attempts
        """
        super().__init__(config)
        self.transport = transport
        self.sleep = sleep

    @property
    def endpoint(self) -> str:
        return self.config.base_url.rstrip("/") + "/chat/completions"

    def get_api_key(self) -> str:
        """Read the credential from the environment.

        Raises:
            ConfigurationError: If the variable is unset or empty
        """
        api_key = os.environ.get(self.config.api_key_env)
        if not api_key:
            raise ConfigurationError(
                f"{self.config.api_key_env} environment variable is not set"
            )
        return api_key

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
        }

    def complete(self, prompt: str) -> str:
        """Send the prompt to the chat completions endpoint.

        Args:
            prompt: The fully composed user prompt

        Returns:
            Content of the first choice, verbatim

        Raises:
            ConfigurationError: If the API key is missing (checked before any request)
            ServiceError: On a non-success status, an unusable body, or
                transport failures that outlast the retry budget
        """
        api_key = self.get_api_key()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = self.build_payload(prompt)

        attempts = self.config.max_retries + 1
        with httpx.Client(timeout=self.config.timeout_seconds, transport=self.transport) as client:
            for attempt in range(1, attempts + 1):
                try:
                    response = client.post(self.endpoint, headers=headers, json=payload)
                except httpx.TransportError as e:
                    if attempt < attempts:
                        self._wait(attempt)
                        continue
                    raise ServiceError(
                        f"Completion request failed after {attempt} attempt(s): {e}"
                    ) from e

                if response.is_success:
                    return self._parse_reply(response)

                if response.status_code in RETRYABLE_STATUS_CODES and attempt < attempts:
                    self._wait(attempt)
                    continue

                raise ServiceError(
                    f"Completion service error: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                    body=response.text,
                )

        # Unreachable: the loop either returns or raises
        raise ServiceError("Completion request made no attempts")

    def _wait(self, attempt: int) -> None:
        """Sleep before the next attempt, doubling each time."""
        self.sleep(self.config.backoff_seconds * (2 ** (attempt - 1)))

    def _parse_reply(self, response: httpx.Response) -> str:
        """Pull ``choices[0].message.content`` out of a response body."""
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ServiceError(
                f"Unexpected completion response: {response.text[:500]}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(content, str):
            raise ServiceError(
                "Completion response has no text content",
                status_code=response.status_code,
                body=response.text,
            )
        return content


def get_completion_provider(config: Config | None = None) -> CompletionProvider:
    """Get the appropriate completion provider based on configuration.

    Args:
        config: Configuration object. If None, loads default config.

    Returns:
        A completion provider instance.

    Raises:
        ConfigurationError: If provider name is not recognized.
    """
    if config is None:
        from ..config import load_config

        config = load_config()

    provider_name = config.llm.provider.lower()

    if provider_name == "mock":
        return MockCompletionProvider(config.llm)
    elif provider_name == "openai":
        return OpenAICompletionProvider(config.llm)
    else:
        raise ConfigurationError(f"Unknown completion provider: {provider_name}")


MOCK_REPLY = """Here is the storyboard for your research.

```yaml
meta:
  videoId: mock-explainer
  title: Mock Explainer
  defaultFps: 30
  defaultResolution:
    width: 1920
    height: 1080
  totalDurationSec: 60
slides:
  - id: hook
    title: Why This Matters
    durationSec: 20
    elements:
      - kind: heading
        content: Why This Matters
        animationIn: fade
        animationOut: fade
        startSec: 0
        endSec: 20
    narration: Let's look at why this problem keeps coming up.
    subtitles: Why this problem keeps coming up.
    audioTracks:
      backgroundMusic: none
      sfx: []
    transitionToNext: cross-fade
  - id: analysis
    title: What We Found
    durationSec: 25
    elements:
      - kind: bulletList
        content:
          - First finding
          - Second finding
        animationIn: spring-fly-in
        animationOut: fade
        startSec: 1
    narration: We found two things worth your attention.
    subtitles: Two findings.
    audioTracks:
      backgroundMusic: none
      sfx:
        - src: whoosh.mp3
          atSec: 1
    transitionToNext: push-left
  - id: wrap-up
    title: What To Do Next
    durationSec: 15
    elements:
      - kind: paragraph
        content: Try it on your own data.
        animationIn: fade
        animationOut: fade
        startSec: 0
    narration: Now it's our turn to try it.
    subtitles: Try it yourself.
    audioTracks:
      backgroundMusic: none
      sfx: []
    transitionToNext: cut
```

```json
{
  "meta": {
    "videoId": "mock-explainer",
    "title": "Mock Explainer",
    "defaultFps": 30,
    "defaultResolution": {"width": 1920, "height": 1080},
    "totalDurationSec": 60
  },
  "slides": [
    {
      "id": "hook",
      "title": "Why This Matters",
      "durationSec": 20,
      "elements": [
        {"kind": "heading", "content": "Why This Matters", "animationIn": "fade", "animationOut": "fade", "startSec": 0, "endSec": 20}
      ],
      "narration": "Let's look at why this problem keeps coming up.",
      "subtitles": "Why this problem keeps coming up.",
      "audioTracks": {"backgroundMusic": "none", "sfx": []},
      "transitionToNext": "cross-fade"
    },
    {
      "id": "analysis",
      "title": "What We Found",
      "durationSec": 25,
      "elements": [
        {"kind": "bulletList", "content": ["First finding", "Second finding"], "animationIn": "spring-fly-in", "animationOut": "fade", "startSec": 1}
      ],
      "narration": "We found two things worth your attention.",
      "subtitles": "Two findings.",
      "audioTracks": {"backgroundMusic": "none", "sfx": [{"src": "whoosh.mp3", "atSec": 1}]},
      "transitionToNext": "push-left"
    },
    {
      "id": "wrap-up",
      "title": "What To Do Next",
      "durationSec": 15,
      "elements": [
        {"kind": "paragraph", "content": "Try it on your own data.", "animationIn": "fade", "animationOut": "fade", "startSec": 0}
      ],
      "narration": "Now it's our turn to try it.",
      "subtitles": "Try it yourself.",
      "audioTracks": {"backgroundMusic": "none", "sfx": []},
      "transitionToNext": "cut"
    }
  ]
}
```

| id | title | durationSec |
|----|-------|-------------|
| hook | Why This Matters | 20 |
| analysis | What We Found | 25 |
| wrap-up | What To Do Next | 15 |
"""

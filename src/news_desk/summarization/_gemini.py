"""Low-level client for the Gemini ``generateContent`` endpoint.

Private to the ``summarization`` package; use
:class:`~news_desk.summarization.service.DigestService` instead.

Error handling maps the HTTP outcome to typed exceptions:
- missing key, HTTP 401/403 -> :class:`~news_desk.core.exceptions.GenerationAuthError`
- other non-2xx, network errors, unexpected body -> :class:`~news_desk.core.exceptions.GenerationError`

The API key travels in the ``key`` query parameter, so exception messages
never include the request URL and are raised ``from None`` so the httpx
error, whose message carries the URL, is not chained into tracebacks.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from news_desk.config.settings import Settings
from news_desk.core.exceptions import GenerationAuthError, GenerationError
from news_desk.summarization.config import GEMINI_API_BASE_URL

logger = logging.getLogger(__name__)


def extract_text(response: dict[str, Any]) -> str:
    """Return ``candidates[0].content.parts[0].text``.

    Raises:
        GenerationError: If any step of the path is missing or not text.
    """
    try:
        text = response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GenerationError(
            f"gemini: unexpected response shape ({type(exc).__name__}: {exc})"
        ) from exc
    if not isinstance(text, str):
        raise GenerationError("gemini: response text is not a string")
    return text


class GeminiClient:
    """Thin wrapper around one Gemini model.

    Args:
        api_key: Generative Language API key.
        model: Model id used in the ``models/{model}:generateContent`` path.
        temperature: ``generationConfig.temperature``.
        max_tokens: ``generationConfig.maxOutputTokens``.
        timeout: Request timeout in seconds.
        http_client: Optional injected client; not closed by this class.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> GeminiClient:
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_tokens=settings.gemini_max_tokens,
            timeout=settings.gemini_timeout_seconds,
            http_client=http_client,
        )

    @property
    def endpoint(self) -> str:
        return f"{GEMINI_API_BASE_URL}/models/{self.model}:generateContent"

    async def generate_text(self, prompt: str) -> str:
        """Send *prompt* and return the first candidate's text.

        Raises:
            GenerationAuthError: No key configured, or the key was rejected.
            GenerationError: Any other failure.
        """
        if not self.api_key:
            raise GenerationAuthError("gemini: no API key configured")

        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        logger.debug("gemini: generateContent model=%s prompt_chars=%d", self.model, len(prompt))

        if self._http_client is not None:
            data = await self._post(self._http_client, payload)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data = await self._post(client, payload)
        return extract_text(data)

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await client.post(
                self.endpoint, params={"key": self.api_key}, json=payload
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            if code in (401, 403):
                raise GenerationAuthError(f"gemini: HTTP {code}, API key rejected") from None
            raise GenerationError(
                f"gemini: HTTP {code}: {exc.response.text[:200]}"
            ) from None
        except httpx.RequestError as exc:
            raise GenerationError(
                f"gemini: network error ({type(exc).__name__})"
            ) from None

        try:
            return response.json()
        except ValueError:
            raise GenerationError("gemini: response body is not JSON") from None

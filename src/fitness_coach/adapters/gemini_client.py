"""Gemini generateContent client."""

from dataclasses import dataclass

import httpx

from fitness_coach.domain.errors import UpstreamError
from fitness_coach.services.diet_plans import TextGenerationClient


@dataclass
class HttpxGeminiClient(TextGenerationClient):
    """HTTPX-backed client for the Gemini REST API."""

    api_key: str
    model: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(
        cls, api_key: str, model: str, base_url: str, timeout: float = 30.0
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> str:
        """Send a single text prompt and return the first candidate's text."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            response = await self.http_client.post(
                url,
                params={"key": self.api_key},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "temperature": temperature,
                        "maxOutputTokens": max_output_tokens,
                    },
                },
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamError("Gemini API request timed out", details=str(exc)) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError("Gemini API request failed", details=str(exc)) from exc

        if response.is_error:
            raise UpstreamError("Error from Gemini API", details=response.text)
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Invalid response from Gemini API", details=response.text
            ) from exc
        return _candidate_text(payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _candidate_text(payload: object) -> str:
    """Return candidates[0].content.parts[0].text or raise UpstreamError."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamError("Invalid response from Gemini API") from exc
    if not isinstance(text, str) or not text:
        raise UpstreamError("Invalid response from Gemini API")
    return text

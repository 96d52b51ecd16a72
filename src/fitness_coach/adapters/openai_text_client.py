"""OpenAI Responses API client for text generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from fitness_coach.domain.errors import UpstreamError
from fitness_coach.services.diet_plans import TextGenerationClient


@dataclass
class OpenAITextClient(TextGenerationClient):
    """Text generation client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout: float = 30.0
    ) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout), model=model)

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> str:
        """Call OpenAI Responses API with a single text input."""
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=prompt,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                store=False,
            )
        except OpenAIError as exc:
            raise UpstreamError("Error from OpenAI API", details=str(exc)) from exc
        output_text = response.output_text
        if not output_text:
            raise UpstreamError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

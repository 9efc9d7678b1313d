"""
Gemini-backed reasoning gateway.

Every prompt the conversation sends (date parsing, intent parsing, budget
allocation, validation, ranking, itineraries and question personalization)
goes through ``GeminiReasoningGateway.complete``.
"""

from trip_concierge.agents.base import AgentConfig, BaseAgent
from trip_concierge.config import ModelConfig
from trip_concierge.utils.error_handling import GatewayError
from trip_concierge.utils.logging import get_logger
from trip_concierge.utils.rate_limiting import rate_limited

logger = get_logger(__name__)

REASONING_INSTRUCTIONS = (
    "You are a friendly, precise travel planning assistant. Follow the "
    "requested output format exactly. When asked for JSON, reply with a single "
    "JSON object and nothing else."
)


class GeminiReasoningGateway(BaseAgent):
    """Reasoning gateway that forwards prompts to a Gemini model."""

    def __init__(
        self,
        model_config: ModelConfig | None = None,
        api_key: str | None = None,
    ):
        config = AgentConfig.from_model_config(
            name="reasoning",
            instructions=REASONING_INSTRUCTIONS,
            model_config=model_config or ModelConfig(),
        )
        super().__init__(config, api_key=api_key)

    @rate_limited("gemini")
    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Args:
            prompt: Complete natural-language prompt

        Returns:
            The model's reply, stripped of surrounding whitespace

        Raises:
            GatewayError: If the model returns no text
        """
        contents, system_instruction = self._convert_messages_for_gemini(
            self._prepare_messages(prompt)
        )

        response = await self.client.aio.models.generate_content(
            model=self.config.model,
            contents=contents,
            config=self._generation_config(system_instruction),
        )

        text = response.text
        if not text:
            raise GatewayError("empty response from model", self.name)

        logger.debug(f"Reasoning reply ({len(text)} chars)")
        return text.strip()

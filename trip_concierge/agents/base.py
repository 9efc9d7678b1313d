"""
Base agent class for the Trip Concierge system.

This module implements the foundation shared by the agents that talk to the
Gemini API: configuration, the client instance and conversion of chat-style
messages into Gemini request contents.
"""

from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from trip_concierge.config import ModelConfig


class TripConciergeAgentError(Exception):
    """Base exception for all agent-related errors."""

    pass


class InvalidConfigurationError(TripConciergeAgentError):
    """Exception raised when agent configuration is invalid."""

    pass


@dataclass
class AgentConfig:
    """Configuration for an agent."""

    name: str
    instructions: str
    model: str = "gemini-2.5-flash"
    temperature: float = 0.8
    max_tokens: int | None = None

    @classmethod
    def from_model_config(
        cls, name: str, instructions: str, model_config: ModelConfig
    ) -> "AgentConfig":
        """Build an agent configuration from the global model settings."""
        return cls(
            name=name,
            instructions=instructions,
            model=model_config.name,
            temperature=model_config.temperature,
            max_tokens=model_config.max_tokens,
        )


class BaseAgent:
    """
    Base class for the agents backed by a Gemini model.

    The BaseAgent owns the API client and the message conversion helpers so
    that subclasses only implement the request they need.
    """

    def __init__(self, config: AgentConfig, api_key: str | None = None):
        """
        Initialize a base agent.

        Args:
            config: Configuration for the agent
            api_key: Gemini API key (defaults to the GEMINI_API_KEY environment
                variable picked up by the client)
        """
        self.config = config
        self._validate_config()
        self.client = genai.Client(api_key=api_key) if api_key else genai.Client()

    @property
    def name(self) -> str:
        """Get the name of the agent."""
        return self.config.name

    @property
    def instructions(self) -> str:
        """Get the instructions for the agent."""
        return self.config.instructions

    def _validate_config(self) -> bool:
        """Validate the agent configuration."""
        if not self.config.name:
            raise InvalidConfigurationError("Agent name cannot be empty")
        if not self.config.instructions:
            raise InvalidConfigurationError("Agent instructions cannot be empty")
        return True

    def _generation_config(
        self, system_instruction: str | None
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_tokens,
        )

    def _convert_messages_for_gemini(
        self, messages: list[dict[str, Any]]
    ) -> tuple[list[types.Content], str | None]:
        """
        Convert chat-style messages to Gemini format.

        Extracts system messages into a system_instruction string,
        and maps remaining messages to types.Content objects.

        Args:
            messages: List of message dictionaries with 'role' and 'content'

        Returns:
            Tuple of (contents list, system_instruction string or None)
        """
        system_parts = []
        contents = []

        for msg in messages:
            role = msg.get("role", "user")
            content = msg.get("content", "")

            if role == "system":
                system_parts.append(content)
            else:
                # Gemini calls the assistant role "model"
                gemini_role = "model" if role == "assistant" else "user"
                contents.append(
                    types.Content(
                        role=gemini_role,
                        parts=[types.Part.from_text(text=content)],
                    )
                )

        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return contents, system_instruction

    def _prepare_messages(self, prompt: str) -> list[dict[str, Any]]:
        """Wrap a single prompt with the agent instructions."""
        return [
            {"role": "system", "content": self.instructions},
            {"role": "user", "content": prompt},
        ]

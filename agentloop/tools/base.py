"""
Tool Base Types
===============

ToolSignature describes one advertised tool; ToolProvider is the interface
every tool provider implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from agentloop.tools.schema import ParameterSchema, ObjectSchema, parse_schema


@dataclass(frozen=True)
class ToolSignature:
    """
    Description of one externally invocable tool.

    Attributes:
        name: Tool name, unique within the catalog
        description: What the tool does (shown to the model)
        parameter_schema: Argument schema

    Example:
        signature = ToolSignature(
            name="fetch",
            description="Fetch a URL and return its text",
            parameter_schema=parse_schema({
                "type": "object",
                "properties": {"url": {"type": "string"}},
                "required": ["url"],
            }),
        )
    """
    name: str
    description: str = ""
    parameter_schema: ParameterSchema = field(default_factory=ObjectSchema)

    @classmethod
    def from_schema(
        cls,
        name: str,
        description: str | None,
        input_schema: dict | None
    ) -> "ToolSignature":
        """Build a signature from a provider's raw JSON-Schema dictionary."""
        return cls(
            name=name,
            description=description or "",
            parameter_schema=parse_schema(input_schema or {}),
        )

    def to_openai_function(self) -> dict:
        """
        Convert to OpenAI function calling format.

        Returns:
            Dict in the format expected by the chat completions API
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameter_schema.to_json(),
            }
        }


class ToolProvider(ABC):
    """
    An external source of tools.

    Implementations must make start() and close() idempotent: the agent
    may call start() on a provider that is already running and always
    calls close() once at teardown, even if start() failed.
    """

    name: str = "provider"

    @abstractmethod
    async def start(self) -> None:
        """Activate the provider (spawn the process, open the session)."""

    @abstractmethod
    async def list_tools(self) -> list[ToolSignature]:
        """Return the tools this provider advertises."""

    @abstractmethod
    async def call(self, name: str, arguments: str) -> str:
        """
        Invoke a tool.

        Args:
            name: Tool name
            arguments: The model's serialized JSON arguments, unparsed

        Returns:
            The tool's text result

        Raises:
            ToolProviderError: If the tool fails or the transport breaks
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the provider. Safe to call more than once."""

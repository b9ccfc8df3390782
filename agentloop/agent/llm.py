"""
Model Collaborator
==================

The agent talks to the language model through ChatModel: given the
conversation so far and the tools on offer, return the next assistant
message. The message may carry tool-invocation requests.

OpenAIChatModel implements it with the chat completions API of any
OpenAI-compatible endpoint (set base_url for a non-OpenAI provider).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import httpx
from openai import AsyncOpenAI, NOT_GIVEN, OpenAIError

from agentloop.agent.conversation import Message, ToolInvocationRequest
from agentloop.errors import ConfigurationError, ModelError
from agentloop.tools import ToolSignature
from agentloop.utils.logger import Logger

logger = Logger("LLM")


class ChatModel(ABC):
    """Interface to the language model."""

    model: str = ""

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSignature]
    ) -> Message:
        """
        Ask the model for the next assistant message.

        Args:
            messages: The full conversation, in order
            tools: Tools the model may request

        Returns:
            An assistant-role Message

        Raises:
            ModelError: If the request fails
        """


class OpenAIChatModel(ChatModel):
    """
    Chat completions with function calling.

    Example:
        model = OpenAIChatModel("gpt-4o-mini", api_key="sk-...")
        reply = await model.complete(conversation.snapshot(), catalog.signatures)
        for call in reply.tool_calls:
            print(call.tool_name, call.arguments)
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None
    ):
        """
        Args:
            model: Model identifier
            api_key: API key for the endpoint
            base_url: Custom endpoint, None for the default
            timeout: HTTP timeout in seconds
            client: Pre-built client (mainly for tests)

        Raises:
            ConfigurationError: If model or api_key is empty
        """
        if not model:
            raise ConfigurationError("A model identifier is required")
        if not api_key and client is None:
            raise ConfigurationError("An API key is required for the model endpoint")

        self.model = model

        if base_url:
            logger.info(f"Using custom model endpoint: {base_url}")

        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(timeout=httpx.Timeout(timeout)),
        )

    async def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSignature]
    ) -> Message:
        functions = [tool.to_openai_function() for tool in tools]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[message.to_openai_message() for message in messages],
                tools=functions if functions else NOT_GIVEN,
            )
        except OpenAIError as e:
            raise ModelError(self.model, f"Model request failed: {e}", e)

        if not response.choices:
            logger.warning("Model returned no choices")
            return Message.assistant("")

        reply = response.choices[0].message
        tool_calls = tuple(
            ToolInvocationRequest(
                id=call.id,
                tool_name=call.function.name,
                arguments=call.function.arguments or "",
            )
            for call in reply.tool_calls or ()
            if call.type == "function"
        )

        return Message.assistant(reply.content or "", tool_calls)

    async def aclose(self) -> None:
        await self.client.close()

"""
Conversation State
==================

The ordered message log of one session.

- Messages are only ever appended; nothing is reordered, edited or removed
- A system message is only accepted as the very first entry
- snapshot() hands out an immutable copy, so nobody outside the session
  can mutate the log

Roles:
    system     the system prompt (at most one, first)
    user       user prompts and injected retrieval context
    assistant  model replies, possibly carrying tool-invocation requests
    tool       tool results, linked back by tool_call_id
"""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolInvocationRequest:
    """
    A model's request to run a tool.

    Attributes:
        id: Opaque id; the tool result message echoes it as tool_call_id
        tool_name: Name of the tool to run
        arguments: Serialized JSON arguments, passed through unparsed
    """
    id: str
    tool_name: str
    arguments: str = ""

    def to_openai_tool_call(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {
                "name": self.tool_name,
                "arguments": self.arguments,
            }
        }


@dataclass(frozen=True)
class Message:
    """
    One turn in the conversation.

    Attributes:
        role: Who produced the message
        content: Message text (may be empty for tool-only assistant turns)
        tool_call_id: Set on tool messages only
        tool_calls: Tool-invocation requests carried by an assistant message
    """
    role: Role
    content: str = ""
    tool_call_id: str | None = None
    tool_calls: tuple[ToolInvocationRequest, ...] = ()

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(
        cls,
        content: str = "",
        tool_calls: tuple[ToolInvocationRequest, ...] = ()
    ) -> "Message":
        return cls(Role.ASSISTANT, content, tool_calls=tuple(tool_calls))

    @classmethod
    def tool(cls, content: str, tool_call_id: str) -> "Message":
        return cls(Role.TOOL, content, tool_call_id=tool_call_id)

    def to_openai_message(self) -> dict:
        """
        Format for the chat completions API.

        Returns:
            Message dict in OpenAI's expected format
        """
        message: dict = {"role": self.role.value, "content": self.content}
        if self.role == Role.TOOL:
            message["tool_call_id"] = self.tool_call_id
        if self.tool_calls:
            message["tool_calls"] = [call.to_openai_tool_call() for call in self.tool_calls]
            if not self.content:
                message["content"] = None
        return message


class Conversation:
    """
    Append-only message log.

    Example:
        conversation = Conversation()
        conversation.append(Message.system("You are a helpful assistant."))
        conversation.append(Message.user("What is in new.md?"))

        messages = conversation.snapshot()
    """

    def __init__(self):
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        """
        Add a message to the end of the log.

        Raises:
            ValueError: If a system message is appended after other messages
        """
        if message.role == Role.SYSTEM and self._messages:
            raise ValueError("A system message must be the first message")
        self._messages.append(message)

    def snapshot(self) -> tuple[Message, ...]:
        """The full ordered log, as an immutable tuple."""
        return tuple(self._messages)

    def to_openai_messages(self) -> list[dict]:
        return [message.to_openai_message() for message in self._messages]

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

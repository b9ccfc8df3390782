"""
MCP Tool Provider
=================

A ToolProvider backed by a Model Context Protocol server running as a
child process and speaking JSON-RPC over stdin/stdout.

Lifecycle:
    provider = MCPToolProvider("fetch", "uvx", ["mcp-server-fetch"])

    await provider.start()              # spawn + initialize handshake
    tools = await provider.list_tools() # tools/list
    text = await provider.call("fetch", '{"url": "https://example.com"}')
    await provider.close()              # terminate the process

start() and close() are idempotent. Every failure, from a command that
cannot be spawned to a tool that reports isError, surfaces as a
ToolProviderError.
"""

import json
from contextlib import AsyncExitStack

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import get_default_environment, stdio_client

from agentloop.errors import ToolProviderError
from agentloop.tools.base import ToolProvider, ToolSignature
from agentloop.utils.logger import Logger

logger = Logger("MCP")


def _content_text(content: list) -> str:
    """Join the text blocks of a tool result; non-text blocks are noted by type."""
    parts = []
    for block in content:
        text = getattr(block, "text", None)
        if text is not None:
            parts.append(text)
        else:
            parts.append(f"[{getattr(block, 'type', 'unknown')} content]")
    return "\n".join(parts)


def parse_arguments(arguments: str) -> dict:
    """
    Decode the model's serialized arguments for an MCP call.

    An empty string means no arguments.

    Raises:
        ValueError: If the payload is not a JSON object
    """
    if not arguments or not arguments.strip():
        return {}
    value = json.loads(arguments)
    if not isinstance(value, dict):
        raise ValueError(f"arguments must be a JSON object, got {type(value).__name__}")
    return value


class MCPToolProvider(ToolProvider):
    """
    Tools from a stdio MCP server.

    Attributes:
        name: Label used in logs and diagnostic events
        command: Executable to launch (e.g. "uvx", "npx")
        args: Command-line arguments
        env: Extra environment for the child process
    """

    def __init__(
        self,
        name: str,
        command: str,
        args: list[str] | tuple[str, ...] = (),
        env: dict[str, str] | None = None
    ):
        self.name = name
        self.command = command
        self.args = list(args)
        self.env = env

        self._stack: AsyncExitStack | None = None
        self._session: ClientSession | None = None
        self._closed = False

    @property
    def started(self) -> bool:
        return self._session is not None

    async def start(self) -> None:
        if self._session is not None:
            return
        if self._closed:
            raise ToolProviderError(self.name, f"Provider '{self.name}' is closed")

        logger.info(f"Starting MCP server '{self.name}': {self.command} {' '.join(self.args)}")
        env = {**get_default_environment(), **self.env} if self.env else None
        params = StdioServerParameters(command=self.command, args=self.args, env=env)

        stack = AsyncExitStack()
        try:
            read, write = await stack.enter_async_context(stdio_client(params))
            session = await stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
        except Exception as e:
            await stack.aclose()
            raise ToolProviderError(self.name, f"Failed to start '{self.name}': {e}", cause=e)

        self._stack = stack
        self._session = session

    async def list_tools(self) -> list[ToolSignature]:
        session = self._require_session()
        try:
            result = await session.list_tools()
        except Exception as e:
            raise ToolProviderError(self.name, f"Failed to list tools: {e}", cause=e)

        return [
            ToolSignature.from_schema(tool.name, tool.description, tool.inputSchema)
            for tool in result.tools
        ]

    async def call(self, name: str, arguments: str) -> str:
        session = self._require_session()
        try:
            payload = parse_arguments(arguments)
        except ValueError as e:
            raise ToolProviderError(self.name, f"Invalid arguments for {name}: {e}", name, e)

        logger.debug(f"Calling {self.name}/{name}", {"arguments": payload})
        try:
            result = await session.call_tool(name, arguments=payload)
        except Exception as e:
            raise ToolProviderError(self.name, f"Call to {name} failed: {e}", name, e)

        text = _content_text(result.content)
        if result.isError:
            raise ToolProviderError(self.name, text or f"Tool {name} reported an error", name)
        return text

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        stack, self._stack, self._session = self._stack, None, None
        if stack is not None:
            await stack.aclose()
            logger.info(f"Closed MCP server '{self.name}'")

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise ToolProviderError(self.name, f"Provider '{self.name}' is not started")
        return self._session

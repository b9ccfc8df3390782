"""Tests for the stdio MCP tool provider (transport mocked)."""

from contextlib import asynccontextmanager

import pytest
from mcp.types import CallToolResult, ListToolsResult, TextContent, Tool

from agentloop.errors import ToolProviderError
from agentloop.tools import mcp_provider
from agentloop.tools.mcp_provider import MCPToolProvider, parse_arguments
from agentloop.tools.schema import ObjectSchema


class FakeSession:
    instances: list["FakeSession"] = []

    def __init__(self, read, write):
        self.initialized = False
        self.calls = []
        self.exited = False
        FakeSession.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.exited = True

    async def initialize(self):
        self.initialized = True

    async def list_tools(self):
        return ListToolsResult(tools=[
            Tool(
                name="fetch",
                description="Fetch a URL",
                inputSchema={"type": "object", "properties": {"url": {"type": "string"}}},
            ),
        ])

    async def call_tool(self, name, arguments=None):
        self.calls.append((name, arguments))
        if name == "broken":
            return CallToolResult(content=[TextContent(type="text", text="bad url")], isError=True)
        return CallToolResult(content=[
            TextContent(type="text", text="line one"),
            TextContent(type="text", text="line two"),
        ])


@pytest.fixture
def transport(monkeypatch):
    launched = []

    @asynccontextmanager
    async def fake_stdio_client(params):
        launched.append(params)
        yield ("read-stream", "write-stream")

    FakeSession.instances = []
    monkeypatch.setattr(mcp_provider, "stdio_client", fake_stdio_client)
    monkeypatch.setattr(mcp_provider, "ClientSession", FakeSession)
    return launched


@pytest.mark.asyncio
async def test_start_is_idempotent(transport):
    provider = MCPToolProvider("fetch", "uvx", ["mcp-server-fetch"])

    await provider.start()
    await provider.start()

    assert len(transport) == 1
    assert transport[0].command == "uvx"
    assert transport[0].args == ["mcp-server-fetch"]
    assert FakeSession.instances[0].initialized
    assert provider.started


@pytest.mark.asyncio
async def test_list_tools_converts_signatures(transport):
    provider = MCPToolProvider("fetch", "uvx")
    await provider.start()

    [signature] = await provider.list_tools()

    assert signature.name == "fetch"
    assert signature.description == "Fetch a URL"
    assert isinstance(signature.parameter_schema, ObjectSchema)


@pytest.mark.asyncio
async def test_call_parses_arguments_and_joins_text(transport):
    provider = MCPToolProvider("fetch", "uvx")
    await provider.start()

    text = await provider.call("fetch", '{"url": "https://example.com"}')

    assert text == "line one\nline two"
    assert FakeSession.instances[0].calls == [("fetch", {"url": "https://example.com"})]


@pytest.mark.asyncio
async def test_error_result_raises(transport):
    provider = MCPToolProvider("fetch", "uvx")
    await provider.start()

    with pytest.raises(ToolProviderError, match="bad url") as exc_info:
        await provider.call("broken", "{}")

    assert exc_info.value.tool_name == "broken"
    assert exc_info.value.provider == "fetch"


@pytest.mark.asyncio
async def test_invalid_arguments_raise(transport):
    provider = MCPToolProvider("fetch", "uvx")
    await provider.start()

    with pytest.raises(ToolProviderError):
        await provider.call("fetch", "[1, 2]")
    assert FakeSession.instances[0].calls == []


@pytest.mark.asyncio
async def test_calls_before_start_raise():
    provider = MCPToolProvider("fetch", "uvx")

    with pytest.raises(ToolProviderError):
        await provider.list_tools()


@pytest.mark.asyncio
async def test_close_is_idempotent(transport):
    provider = MCPToolProvider("fetch", "uvx")
    await provider.start()

    await provider.close()
    await provider.close()

    assert FakeSession.instances[0].exited
    assert not provider.started
    with pytest.raises(ToolProviderError):
        await provider.start()


@pytest.mark.asyncio
async def test_spawn_failure_is_a_provider_error(monkeypatch):
    @asynccontextmanager
    async def failing_stdio_client(params):
        raise FileNotFoundError(params.command)
        yield

    monkeypatch.setattr(mcp_provider, "stdio_client", failing_stdio_client)
    provider = MCPToolProvider("ghost", "no-such-binary")

    with pytest.raises(ToolProviderError, match="ghost"):
        await provider.start()


@pytest.mark.parametrize("raw, expected", [
    ("", {}),
    ("   ", {}),
    ('{"a": 1}', {"a": 1}),
])
def test_parse_arguments(raw, expected):
    assert parse_arguments(raw) == expected


def test_parse_arguments_rejects_non_objects():
    with pytest.raises(ValueError):
        parse_arguments('"just a string"')
    with pytest.raises(ValueError):
        parse_arguments("{broken")

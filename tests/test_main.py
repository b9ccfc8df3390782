"""Tests for the command-line entry point."""

from pathlib import Path

import pytest

from agentloop import main as main_module
from agentloop.main import build_parser, build_providers, resolve_max_rounds
from agentloop.tools import MCPToolProvider
from agentloop.utils.config import (
    AgentConfig,
    Config,
    MCPConfig,
    MCPServerConfig,
    OpenAIConfig,
    RAGConfig,
)


def _config(*servers):
    return Config(
        openai=OpenAIConfig(api_key="k", model="m", base_url=None, timeout_seconds=60.0),
        agent=AgentConfig(system_prompt="", max_rounds=20, timeout_seconds=None),
        rag=RAGConfig(Path("kb"), max_results=3, min_score=0.1, file_extensions=(".txt",)),
        mcp=MCPConfig(config_path=Path("mcp_servers.json"), servers=servers),
        log_level="info",
    )


def test_parser_joins_prompt_words():
    args = build_parser().parse_args(["summarize", "the", "page", "--no-rag", "--max-rounds", "5"])

    assert " ".join(args.prompt) == "summarize the page"
    assert args.no_rag
    assert args.max_rounds == 5
    assert args.timeout is None


def test_build_providers_keeps_server_order():
    providers = build_providers(_config(
        MCPServerConfig("fetch", "uvx", ("mcp-server-fetch",)),
        MCPServerConfig("files", "npx", ("-y", "server-filesystem"), {"A": "1"}),
    ))

    assert [p.name for p in providers] == ["fetch", "files"]
    assert all(isinstance(p, MCPToolProvider) for p in providers)
    assert providers[1].args == ["-y", "server-filesystem"]
    assert providers[1].env == {"A": "1"}
    assert not providers[0].started


@pytest.mark.parametrize("override, configured, expected", [
    (None, 20, 20),
    (None, None, None),
    (5, 20, 5),
    (0, 20, None),
])
def test_resolve_max_rounds(override, configured, expected):
    assert resolve_max_rounds(override, configured) == expected


class ClosingModel:
    instances: list["ClosingModel"] = []

    def __init__(self, **kwargs):
        self.closed = False
        ClosingModel.instances.append(self)

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_model_client_closed_when_agent_creation_fails(monkeypatch):
    async def failing_create(**kwargs):
        raise ValueError("bad limits")

    ClosingModel.instances = []
    monkeypatch.setattr(main_module, "get_config", lambda: _config())
    monkeypatch.setattr(main_module, "OpenAIChatModel", ClosingModel)
    monkeypatch.setattr(main_module.Agent, "create", failing_create)

    with pytest.raises(ValueError, match="bad limits"):
        await main_module.main(["hello", "--no-rag"])

    [model] = ClosingModel.instances
    assert model.closed

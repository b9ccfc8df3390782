"""
Configuration Management
========================

Centralized configuration for the agent. All environment variables are
read, validated and typed here so the rest of the code never calls
os.getenv() directly.

Required:
    OPENAI_API_KEY      Credential for the model endpoint
    OPENAI_MODEL        Model identifier

Optional:
    OPENAI_BASE_URL         Custom OpenAI-compatible endpoint
    OPENAI_TIMEOUT_SECONDS  HTTP timeout for model calls (60)
    SYSTEM_PROMPT           System prompt for the session
    AGENT_MAX_ROUNDS        Round cap, 0 disables it (20)
    AGENT_TIMEOUT_SECONDS   Task deadline, 0 disables it (0)
    KNOWLEDGE_BASE_DIR      Corpus root; retrieval is on if it exists
    RAG_MAX_RESULTS         Documents injected per task (3)
    RAG_MIN_SCORE           Relevance threshold (0.1)
    RAG_FILE_EXTENSIONS     Comma separated allow-list (.txt,.md,.go)
    MCP_CONFIG_PATH         JSON file listing MCP servers
    LOG_LEVEL               debug / info / warning / error

MCP server file:
    {
      "mcpServers": {
        "fetch": {"command": "uvx", "args": ["mcp-server-fetch"]},
        "files": {"command": "npx", "args": ["-y", "@modelcontextprotocol/server-filesystem", "."]}
      }
    }

Usage:
    from agentloop.utils.config import get_config

    config = get_config()
    print(config.openai.model)
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from agentloop.errors import ConfigurationError


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ConfigurationError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your environment or .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name, default)


def _optional_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


def _optional_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """Model endpoint configuration."""
    api_key: str
    model: str
    base_url: str | None    # None means the official endpoint
    timeout_seconds: float


@dataclass(frozen=True)
class AgentConfig:
    """Orchestration loop configuration."""
    system_prompt: str
    max_rounds: int | None        # None = unbounded
    timeout_seconds: float | None # None = no deadline


@dataclass(frozen=True)
class RAGConfig:
    """Local retrieval configuration."""
    knowledge_base_dir: Path
    max_results: int
    min_score: float
    file_extensions: tuple[str, ...]


@dataclass(frozen=True)
class MCPServerConfig:
    """One stdio MCP server to launch."""
    name: str
    command: str
    args: tuple[str, ...] = ()
    env: dict[str, str] | None = None


@dataclass(frozen=True)
class MCPConfig:
    config_path: Path
    servers: tuple[MCPServerConfig, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.openai.model
        config.agent.max_rounds
        config.rag.knowledge_base_dir
    """
    openai: OpenAIConfig
    agent: AgentConfig
    rag: RAGConfig
    mcp: MCPConfig
    log_level: str


def load_mcp_servers(path: Path) -> tuple[MCPServerConfig, ...]:
    """
    Read MCP server definitions from a JSON file.

    A missing file means no servers. Entries with "disabled": true are
    skipped.

    Raises:
        ConfigurationError: If the file is not valid JSON or an entry has
            no command
    """
    if not path.is_file():
        return ()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read MCP config {path}: {e}")

    entries = data.get("mcpServers", {}) if isinstance(data, dict) else None
    if not isinstance(entries, dict):
        raise ConfigurationError(f"{path}: 'mcpServers' must be an object")

    servers = []
    for name, entry in entries.items():
        if not isinstance(entry, dict) or not entry.get("command"):
            raise ConfigurationError(f"{path}: server '{name}' has no command")
        if entry.get("disabled"):
            continue
        env = entry.get("env")
        servers.append(MCPServerConfig(
            name=name,
            command=entry["command"],
            args=tuple(str(arg) for arg in entry.get("args", [])),
            env={str(k): str(v) for k, v in env.items()} if env else None,
        ))
    return tuple(servers)


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Returns:
        Config: The validated configuration

    Raises:
        ConfigurationError: If required configuration is missing or invalid
    """
    load_dotenv()

    max_rounds = _optional_int("AGENT_MAX_ROUNDS", 20)
    timeout = _optional_float("AGENT_TIMEOUT_SECONDS", 0)
    mcp_path = Path(_optional("MCP_CONFIG_PATH", "mcp_servers.json"))

    return Config(
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_required("OPENAI_MODEL"),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout_seconds=_optional_float("OPENAI_TIMEOUT_SECONDS", 60.0),
        ),
        agent=AgentConfig(
            system_prompt=_optional("SYSTEM_PROMPT", ""),
            max_rounds=max_rounds if max_rounds > 0 else None,
            timeout_seconds=timeout if timeout > 0 else None,
        ),
        rag=RAGConfig(
            knowledge_base_dir=Path(_optional("KNOWLEDGE_BASE_DIR", "knowledge_base")),
            max_results=_optional_int("RAG_MAX_RESULTS", 3),
            min_score=_optional_float("RAG_MIN_SCORE", 0.1),
            file_extensions=_optional_list("RAG_FILE_EXTENSIONS", (".txt", ".md", ".go")),
        ),
        mcp=MCPConfig(
            config_path=mcp_path,
            servers=load_mcp_servers(mcp_path),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the singleton configuration instance.

    Loaded on first access and cached for subsequent calls.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None

"""
agentloop - Main Entry Point
============================

Runs one task from the command line. It:
1. Loads configuration (.env + environment)
2. Builds the MCP tool providers listed in the MCP config file
3. Creates the agent (retrieval on if the knowledge base exists)
4. Runs the task and prints the answer to stdout

Run with:
    python -m agentloop.main "Summarize https://example.com into new.md"

Or after installing:
    agentloop "Summarize https://example.com into new.md"
"""

import argparse
import asyncio
import sys

from agentloop.agent import Agent, OpenAIChatModel
from agentloop.errors import AgentError
from agentloop.tools import MCPToolProvider
from agentloop.utils.config import Config, get_config
from agentloop.utils.logger import Logger, set_level

main_logger = Logger("Main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentloop",
        description="Run a tool-calling agent task.",
    )
    parser.add_argument("prompt", nargs="+", help="The task for the agent")
    parser.add_argument("--no-rag", action="store_true", help="Disable knowledge base retrieval")
    parser.add_argument("--max-rounds", type=int, help="Override AGENT_MAX_ROUNDS (0 = unbounded)")
    parser.add_argument("--timeout", type=float, help="Override AGENT_TIMEOUT_SECONDS")
    return parser


def build_providers(config: Config) -> list[MCPToolProvider]:
    """Create (not start) one provider per configured MCP server."""
    return [
        MCPToolProvider(server.name, server.command, server.args, server.env)
        for server in config.mcp.servers
    ]


def resolve_max_rounds(override: int | None, configured: int | None) -> int | None:
    """Pick the round cap; 0 on the command line means unbounded, as in AGENT_MAX_ROUNDS."""
    if override is None:
        return configured
    return override or None


async def main(argv: list[str] | None = None) -> str:
    """
    Main async entry point.

    Returns:
        The agent's final answer
    """
    args = build_parser().parse_args(argv)

    main_logger.info("Loading configuration...")
    config = get_config()
    set_level(config.log_level)

    providers = build_providers(config)
    main_logger.info(f"Configured {len(providers)} MCP servers from {config.mcp.config_path}")

    knowledge_base = None if args.no_rag else config.rag.knowledge_base_dir

    model = OpenAIChatModel(
        model=config.openai.model,
        api_key=config.openai.api_key,
        base_url=config.openai.base_url,
        timeout=config.openai.timeout_seconds,
    )

    try:
        agent = await Agent.create(
            model=model,
            providers=providers,
            system_prompt=config.agent.system_prompt,
            knowledge_base_dir=knowledge_base,
            max_rounds=resolve_max_rounds(args.max_rounds, config.agent.max_rounds),
            timeout=args.timeout if args.timeout is not None else config.agent.timeout_seconds,
            retriever_options={
                "max_results": config.rag.max_results,
                "min_score": config.rag.min_score,
                "extensions": config.rag.file_extensions,
            },
        )
        return await agent.invoke(" ".join(args.prompt))
    finally:
        await model.aclose()


def run() -> None:
    """
    Synchronous entry point.

    This is called when running with the `agentloop` command.
    """
    try:
        result = asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except (AgentError, ValueError) as e:
        main_logger.error("Task failed", e)
        sys.exit(1)

    print(result)


if __name__ == "__main__":
    run()

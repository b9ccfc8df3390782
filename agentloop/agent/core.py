"""
Agent Core
==========

The session that drives one task from prompt to final answer.

Agent Loop:
    User Prompt
         │
         ▼
    Retrieve context (if a knowledge base is configured)
         │
         ▼
    Model request with the catalog's tools  ◄──────────┐
         │                                             │
         ▼                                             │
    ┌─── Has Tool Calls? ───┐                          │
    │                       │                          │
    Yes                     No                         │
    │                       │                          │
    ▼                       ▼                          │
    Execute tools      Close providers,                │
    in order           return the answer               │
    │                                                  │
    ▼                                                  │
    Append tool results ───────────────────────────────┘

Every exit path (answer, model error, round cap, deadline, cancellation)
closes the tool providers exactly once.
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from agentloop.agent.conversation import Conversation, Message
from agentloop.agent.llm import ChatModel
from agentloop.agent.tools_executor import ToolExecutor
from agentloop.errors import (
    AgentTimeoutError,
    MaxRoundsExceededError,
    RetrievalError,
    SessionClosedError,
)
from agentloop.events import DiagnosticEvent, EventKind, EventLog
from agentloop.rag import Retriever
from agentloop.tools import ToolCatalog, ToolProvider
from agentloop.utils.logger import Logger

logger = Logger("Agent")


class Agent:
    """
    A conversational agent that calls external tools.

    Build it with Agent.create(), which starts the providers, then run one
    task with invoke(). The session closes itself when the task ends.

    Example:
        agent = await Agent.create(
            model=OpenAIChatModel("gpt-4o-mini", api_key="sk-..."),
            providers=[MCPToolProvider("fetch", "uvx", ["mcp-server-fetch"])],
            system_prompt="You are a research assistant.",
            knowledge_base_dir=Path("knowledge_base"),
            max_rounds=20,
        )

        answer = await agent.invoke("Summarize https://example.com into new.md")
    """

    def __init__(
        self,
        model: ChatModel | None,
        providers: Sequence[ToolProvider],
        catalog: ToolCatalog,
        events: EventLog,
        retriever: Retriever | None = None,
        system_prompt: str = "",
        initial_context: str = "",
        max_rounds: int | None = None,
        timeout: float | None = None
    ):
        """
        Assemble a session from already-started parts.

        Most callers want Agent.create() instead.

        Args:
            model: The model collaborator; None makes invoke() return ""
            providers: Every registered provider, started or not
            catalog: Tools gathered from the providers
            events: Diagnostic event log shared with the catalog
            retriever: Optional knowledge base retriever
            system_prompt: First message of the conversation, if non-empty
            initial_context: Static context added as a user message after
                the system prompt, if non-empty
            max_rounds: Maximum model requests per task, None = unbounded
            timeout: Task deadline in seconds, None = no deadline
        """
        if max_rounds is not None and max_rounds < 1:
            raise ValueError(f"max_rounds must be at least 1, got {max_rounds}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.model = model
        self.providers = tuple(providers)
        self.catalog = catalog
        self.retriever = retriever
        self.max_rounds = max_rounds
        self.timeout = timeout

        self._events = events
        self._conversation = Conversation()
        self._executor = ToolExecutor(catalog, events)
        self._closed = False

        if system_prompt:
            self._conversation.append(Message.system(system_prompt))
        if initial_context:
            self._conversation.append(Message.user(initial_context))

    @classmethod
    async def create(
        cls,
        model: ChatModel | None,
        providers: Sequence[ToolProvider] = (),
        system_prompt: str = "",
        knowledge_base_dir: Path | str | None = None,
        initial_context: str = "",
        max_rounds: int | None = None,
        timeout: float | None = None,
        retriever_options: dict | None = None
    ) -> "Agent":
        """
        Start the providers and build a session.

        A provider that fails to start is logged and contributes no tools.
        Retrieval is enabled only if knowledge_base_dir is an existing
        directory.

        Args:
            retriever_options: Extra Retriever arguments (max_results,
                min_score, extensions)

        Returns:
            A ready Agent
        """
        events = EventLog()
        providers = tuple(providers)

        try:
            catalog = await ToolCatalog.build(providers, events)

            retriever = None
            if knowledge_base_dir and Path(knowledge_base_dir).is_dir():
                retriever = Retriever(Path(knowledge_base_dir), **(retriever_options or {}))
                logger.info(f"Retrieval enabled with knowledge base: {knowledge_base_dir}")
            elif knowledge_base_dir:
                logger.info(f"Knowledge base not found, retrieval disabled: {knowledge_base_dir}")

            agent = cls(
                model=model,
                providers=providers,
                catalog=catalog,
                events=events,
                retriever=retriever,
                system_prompt=system_prompt,
                initial_context=initial_context,
                max_rounds=max_rounds,
                timeout=timeout,
            )
        except BaseException:
            # No session is handed out
            for provider in providers:
                await _close_quietly(provider)
            raise

        logger.info(f"Agent initialized with {len(catalog)} tools from {len(providers)} providers")
        return agent

    # ==========================================================================
    # Task execution
    # ==========================================================================

    async def invoke(self, prompt: str) -> str:
        """
        Run one task to completion.

        Args:
            prompt: The user's request

        Returns:
            The model's final text answer ("" without a model)

        Raises:
            ModelError: If a model request fails
            MaxRoundsExceededError: If the model keeps requesting tools
                past max_rounds
            AgentTimeoutError: If the deadline expires
            SessionClosedError: If the session was already closed
        """
        if self._closed:
            raise SessionClosedError()

        try:
            if self.model is None:
                logger.warning("No model configured, returning empty result")
                return ""

            if self.timeout is None:
                return await self._run(prompt)

            try:
                return await asyncio.wait_for(self._run(prompt), self.timeout)
            except asyncio.TimeoutError as e:
                raise AgentTimeoutError(self.timeout) from e
        except BaseException as e:
            if not isinstance(e, asyncio.CancelledError):
                logger.error("Task aborted", e)
            raise
        finally:
            await self.close()

    async def _run(self, prompt: str) -> str:
        await self._inject_retrieval(prompt)

        rounds = 0
        while True:
            if prompt:
                self._conversation.append(Message.user(prompt))
                prompt = ""

            if self.max_rounds is not None and rounds >= self.max_rounds:
                raise MaxRoundsExceededError(self.max_rounds)
            rounds += 1

            logger.debug(f"Round {rounds}: sending {len(self._conversation)} messages")
            reply = await self.model.complete(
                self._conversation.snapshot(),
                self.catalog.signatures,
            )
            self._conversation.append(reply)

            if not reply.tool_calls:
                logger.info(f"Final answer after {rounds} rounds ({len(reply.content)} chars)")
                return reply.content

            logger.info(f"Round {rounds}: {len(reply.tool_calls)} tool calls")
            for message in await self._executor.execute_all(reply.tool_calls):
                self._conversation.append(message)

    async def _inject_retrieval(self, prompt: str) -> None:
        if self.retriever is None:
            return

        logger.info("Retrieving relevant context from knowledge base...")
        try:
            context = await asyncio.to_thread(self.retriever.retrieve, prompt)
        except RetrievalError as e:
            self._events.record(
                EventKind.RETRIEVAL_FAILED,
                knowledge_base=str(self.retriever.knowledge_base_dir),
                error=str(e),
            )
            return

        if context:
            logger.info("Injecting retrieved context into the conversation")
            self._conversation.append(Message.user(context))

    # ==========================================================================
    # Teardown
    # ==========================================================================

    async def close(self) -> None:
        """Close every provider. Only the first call does anything."""
        if self._closed:
            return
        self._closed = True

        for provider in self.providers:
            await _close_quietly(provider)
        logger.info("All tool providers closed")

    async def __aenter__(self) -> "Agent":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ==========================================================================
    # Introspection
    # ==========================================================================

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_retrieval(self) -> bool:
        return self.retriever is not None

    @property
    def messages(self) -> tuple[Message, ...]:
        """The conversation so far (read-only copy)."""
        return self._conversation.snapshot()

    @property
    def events(self) -> tuple[DiagnosticEvent, ...]:
        return self._events.events


async def _close_quietly(provider: ToolProvider) -> None:
    try:
        await provider.close()
    except Exception as e:
        logger.error(f"Failed to close provider '{provider.name}'", e)

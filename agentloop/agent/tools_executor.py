"""
Tool Executor
=============

Runs the tool-invocation requests from one model reply.

For each request, in the order the model listed them:
1. Resolve the tool name in the catalog
2. Unknown name: record a tool_not_found event, produce nothing
3. Known name: call the owning provider with the raw arguments
4. Provider error: record a tool_call_failed event, produce nothing
5. Success: produce a tool message carrying the result and request id

Requests run one after another, never concurrently. The loop then feeds
the produced messages back to the model.
"""

from collections.abc import Sequence

from agentloop.agent.conversation import Message, ToolInvocationRequest
from agentloop.events import EventKind, EventLog
from agentloop.tools import ToolCatalog
from agentloop.utils.logger import Logger

logger = Logger("ToolExecutor")


class ToolExecutor:
    """
    Executes model-requested tools through the catalog.

    Example:
        executor = ToolExecutor(catalog, events)

        for message in await executor.execute_all(reply.tool_calls):
            conversation.append(message)
    """

    def __init__(self, catalog: ToolCatalog, events: EventLog):
        self.catalog = catalog
        self.events = events

    async def execute_one(self, request: ToolInvocationRequest) -> Message | None:
        """
        Execute a single tool-invocation request.

        Returns:
            The tool message, or None if the request was skipped
        """
        entry = self.catalog.lookup(request.tool_name)
        if entry is None:
            self.events.record(
                EventKind.TOOL_NOT_FOUND,
                tool_call_id=request.id,
                tool_name=request.tool_name,
            )
            return None

        logger.info(f"Tool use: {request.tool_name}", {
            "tool_call_id": request.id,
            "provider": entry.provider.name,
            "arguments": request.arguments,
        })

        try:
            text = await entry.provider.call(request.tool_name, request.arguments)
        except Exception as e:
            self.events.record(
                EventKind.TOOL_CALL_FAILED,
                tool_call_id=request.id,
                tool_name=request.tool_name,
                provider=entry.provider.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        logger.debug(f"Tool {request.tool_name} returned {len(text)} chars")
        return Message.tool(text, request.id)

    async def execute_all(
        self,
        requests: Sequence[ToolInvocationRequest]
    ) -> list[Message]:
        """
        Execute requests sequentially.

        Returns:
            Tool messages for the requests that succeeded, in request order
        """
        results = []

        for request in requests:
            message = await self.execute_one(request)
            if message is not None:
                results.append(message)

        return results

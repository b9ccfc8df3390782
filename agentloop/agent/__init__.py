"""
Agent System
============

The agent drives a task from the user's prompt to a final answer. It:
1. Optionally grounds the prompt with retrieved knowledge base context
2. Sends the conversation and available tools to the model
3. Runs the tools the model asks for and feeds the results back
4. Repeats until the model answers without requesting tools

This module provides:
- Agent: The orchestration loop and session owner
- Conversation / Message: The append-only message log
- ChatModel / OpenAIChatModel: The model collaborator
- ToolExecutor: Sequential dispatch of tool-invocation requests
"""

from agentloop.agent.conversation import (
    Conversation,
    Message,
    Role,
    ToolInvocationRequest,
)
from agentloop.agent.llm import ChatModel, OpenAIChatModel
from agentloop.agent.tools_executor import ToolExecutor
from agentloop.agent.core import Agent

__all__ = [
    "Agent",
    "Conversation",
    "Message",
    "Role",
    "ToolInvocationRequest",
    "ChatModel",
    "OpenAIChatModel",
    "ToolExecutor",
]

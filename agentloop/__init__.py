"""
agentloop - Tool-Calling Agent with Local Retrieval
====================================================

A conversational agent that lets a language model call tools exposed by
MCP servers, grounding its answers in a local knowledge base.

This package provides:
- Agent orchestration loop (model replies interleaved with tool calls)
- Tool catalog aggregated from MCP tool providers
- Keyword retrieval over a directory of plain-text documents
- Environment-driven configuration and diagnostic logging
"""

__version__ = "1.0.0"

"""
Tools System
============

Tools are capabilities advertised by external tool providers (usually MCP
servers) that the model can ask the agent to run.

- Each provider advertises tools with a name, description and parameter
  schema
- The catalog merges every provider's tools into the list the model sees
- The model decides which tool to call and with which JSON arguments
- The agent hands the arguments, unparsed, to the owning provider

How a tool call flows:
1. Model reply contains a tool-invocation request (id, name, arguments)
2. Catalog resolves the name to a (signature, provider) entry
3. Provider runs the tool and returns text
4. The text goes back into the conversation as a tool message

This module provides:
- ToolSignature: one advertised tool
- ToolProvider: the interface every provider implements
- ToolCatalog / CatalogEntry: the merged, deduplicated view
- MCPToolProvider: a provider backed by a stdio MCP server
"""

from agentloop.tools.schema import (
    ParameterSchema,
    PrimitiveSchema,
    ObjectSchema,
    ArraySchema,
    UnknownSchema,
    parse_schema,
    normalize_parameters,
)
from agentloop.tools.base import ToolSignature, ToolProvider
from agentloop.tools.catalog import ToolCatalog, CatalogEntry
from agentloop.tools.mcp_provider import MCPToolProvider

__all__ = [
    "ToolSignature",
    "ToolProvider",
    "ToolCatalog",
    "CatalogEntry",
    "MCPToolProvider",
    "ParameterSchema",
    "PrimitiveSchema",
    "ObjectSchema",
    "ArraySchema",
    "UnknownSchema",
    "parse_schema",
    "normalize_parameters",
]

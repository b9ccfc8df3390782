"""
Tool Catalog
============

The merged view of every connected provider's tools.

The catalog is built once per session:
1. Each provider is started and asked for its tools, in registration order
2. A provider that fails to start or list is skipped; its tools are absent
3. Each signature's schema is normalized (typeless schemas become objects)
4. If two providers advertise the same name, the first one wins and the
   later one is shadowed: it is never shown to the model and never called

Example:
    events = EventLog()
    catalog = await ToolCatalog.build([fetch_provider, file_provider], events)

    entry = catalog.lookup("fetch")
    if entry:
        text = await entry.provider.call(entry.signature.name, '{"url": "..."}')

    tools = catalog.to_openai_tools()
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from agentloop.events import EventKind, EventLog
from agentloop.tools.base import ToolProvider, ToolSignature
from agentloop.tools.schema import normalize_parameters
from agentloop.utils.logger import Logger

logger = Logger("Catalog")


@dataclass(frozen=True)
class CatalogEntry:
    signature: ToolSignature
    provider: ToolProvider


class ToolCatalog:
    """
    Name -> (signature, provider) lookup over all active providers.

    Entries keep the order in which they were first registered.
    """

    def __init__(self):
        self._entries: dict[str, CatalogEntry] = {}

    @classmethod
    async def build(
        cls,
        providers: Iterable[ToolProvider],
        events: EventLog | None = None
    ) -> "ToolCatalog":
        """
        Start every provider and collect its tools.

        Args:
            providers: Providers in registration order
            events: Where skipped providers and shadowed tools are recorded

        Returns:
            The populated catalog
        """
        events = events if events is not None else EventLog()
        catalog = cls()

        for provider in providers:
            try:
                await provider.start()
                signatures = await provider.list_tools()
            except Exception as e:
                logger.error(f"Provider '{provider.name}' unavailable", e)
                events.record(
                    EventKind.PROVIDER_UNAVAILABLE,
                    provider=provider.name,
                    error=str(e),
                )
                continue

            for signature in signatures:
                catalog.register(signature, provider, events)

        logger.info(f"Catalog ready with {len(catalog)} tools")
        return catalog

    def register(
        self,
        signature: ToolSignature,
        provider: ToolProvider,
        events: EventLog | None = None
    ) -> bool:
        """
        Add one tool unless its name is already taken.

        Returns:
            True if added, False if shadowed by an earlier provider
        """
        existing = self._entries.get(signature.name)
        if existing is not None:
            if events is not None:
                events.record(
                    EventKind.TOOL_SHADOWED,
                    tool_name=signature.name,
                    provider=provider.name,
                    kept_provider=existing.provider.name,
                )
            return False

        normalized = replace(
            signature,
            parameter_schema=normalize_parameters(signature.parameter_schema),
        )
        self._entries[signature.name] = CatalogEntry(normalized, provider)
        logger.info(f"Tool ready: {signature.name}")
        return True

    def lookup(self, name: str) -> CatalogEntry | None:
        """Find a tool by exact name."""
        return self._entries.get(name)

    @property
    def signatures(self) -> list[ToolSignature]:
        return [entry.signature for entry in self._entries.values()]

    def names(self) -> list[str]:
        return list(self._entries)

    def to_openai_tools(self) -> list[dict]:
        """All signatures in OpenAI function calling format."""
        return [signature.to_openai_function() for signature in self.signatures]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

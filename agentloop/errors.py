"""
Errors
======

Structured error hierarchy for the agent.

Every error carries a short machine-readable ``code`` so callers (and
tests) can branch on the failure kind without parsing messages:

- ConfigurationError: missing model identifier, credentials or bad config
- ModelError: the model collaborator failed (transport or validation)
- ToolProviderError: a tool provider failed to start, list or call
- RetrievalError / CorpusNotFoundError: the local knowledge base failed
- MaxRoundsExceededError: the model kept requesting tools past the cap
- AgentTimeoutError: the task deadline expired
- SessionClosedError: the session was already torn down
"""


class AgentError(Exception):
    """Base class for all agent errors."""

    def __init__(self, code: str, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.code = code
        self.cause = cause


class ConfigurationError(AgentError, ValueError):
    def __init__(self, message: str):
        super().__init__("CONFIGURATION_ERROR", message)


class ModelError(AgentError):
    def __init__(self, model: str, message: str, cause: Exception | None = None):
        super().__init__("MODEL_ERROR", message, cause)
        self.model = model


class ToolProviderError(AgentError):
    def __init__(
        self,
        provider: str,
        message: str,
        tool_name: str | None = None,
        cause: Exception | None = None
    ):
        super().__init__("TOOL_PROVIDER_ERROR", message, cause)
        self.provider = provider
        self.tool_name = tool_name


class RetrievalError(AgentError):
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__("RETRIEVAL_ERROR", message, cause)


class CorpusNotFoundError(RetrievalError):
    def __init__(self, path: str):
        super().__init__(f"Knowledge base directory does not exist: {path}")
        self.code = "CORPUS_NOT_FOUND"
        self.path = path


class MaxRoundsExceededError(AgentError):
    def __init__(self, max_rounds: int):
        super().__init__(
            "MAX_ROUNDS_EXCEEDED",
            f"Model still requested tools after {max_rounds} rounds"
        )
        self.max_rounds = max_rounds


class AgentTimeoutError(AgentError, TimeoutError):
    def __init__(self, timeout: float):
        super().__init__("AGENT_TIMEOUT", f"Task did not finish within {timeout}s")
        self.timeout = timeout


class SessionClosedError(AgentError):
    def __init__(self):
        super().__init__("SESSION_CLOSED", "Agent session is already closed")

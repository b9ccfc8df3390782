"""
RAG (Retrieval Augmented Generation) System
============================================

Grounds the agent's answers in a local knowledge base. Before the user's
prompt reaches the model, the retriever:

1. Loads every plain-text document under the knowledge base directory
2. Scores each one against the prompt with keyword relevance
3. Keeps the top-K documents above a minimum score
4. Renders them into a single context block

The block is injected into the conversation as a user message ahead of
the prompt itself.

Components:
- scoring.py: Tokenizer and relevance scorer
- loader.py: Knowledge base walking and Document objects
"""

from pathlib import Path

from agentloop.errors import RetrievalError, CorpusNotFoundError
from agentloop.rag.loader import Document, DocumentLoader, DEFAULT_EXTENSIONS
from agentloop.rag.scoring import score, tokenize
from agentloop.utils.logger import Logger

logger = Logger("Retriever")

# Characters of each document copied into the context block
MAX_DOCUMENT_CHARS = 1000
TRUNCATION_MARKER = "..."

CONTEXT_HEADER = "=== Retrieved context ==="
CONTEXT_FOOTER = "=== End of retrieved context ==="
CONTEXT_INSTRUCTION = "Answer the user's question using the context above."


class Retriever:
    """
    Keyword retriever over a local knowledge base.

    Example:
        retriever = Retriever(Path("knowledge_base"))

        context = retriever.retrieve("quick fox")
        if context:
            messages.append({"role": "user", "content": context})

        # Inspect the scored documents instead of the rendered block
        for doc in retriever.search("quick fox"):
            print(f"{doc.score:.2f} {doc.path}")
    """

    def __init__(
        self,
        knowledge_base_dir: Path,
        max_results: int = 3,
        min_score: float = 0.1,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ):
        """
        Initialize the retriever.

        Args:
            knowledge_base_dir: Root of the knowledge base
            max_results: Maximum documents returned per query
            min_score: Minimum relevance score for a document to be kept

        Raises:
            ValueError: If max_results < 1 or min_score is outside [0, 1]
        """
        if max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {max_results}")
        if not 0.0 <= min_score <= 1.0:
            raise ValueError(f"min_score must be within [0, 1], got {min_score}")

        self.knowledge_base_dir = Path(knowledge_base_dir)
        self.max_results = max_results
        self.min_score = min_score
        self.loader = DocumentLoader(self.knowledge_base_dir, extensions)

    def retrieve(self, query: str) -> str:
        """
        Retrieve context for a query.

        Args:
            query: Free-text query (usually the user's prompt)

        Returns:
            The rendered context block, or "" when nothing is relevant

        Raises:
            CorpusNotFoundError: If the knowledge base directory is missing
            RetrievalError: If the knowledge base cannot be read
        """
        documents = self.search(query)
        if not documents:
            return ""

        logger.info(f"Retrieved {len(documents)} documents for query")
        return self.build_context(documents, query)

    def search(self, query: str) -> list[Document]:
        """
        Load, score, filter and select documents for a query.

        Returns:
            Up to max_results documents, highest score first
        """
        documents = self.loader.load()
        if not documents:
            logger.debug("Knowledge base is empty")
            return []

        scored = self.score_documents(query, documents)
        return self.select_top(scored)

    def score_documents(self, query: str, documents: list[Document]) -> list[Document]:
        """
        Score documents and drop those below min_score.

        Returns:
            The kept documents with their score set
        """
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        query_set = {token.lower() for token in query_tokens}

        kept = []
        for doc in documents:
            doc_score = score(query_tokens, query_set, doc.content)
            if doc_score >= self.min_score:
                doc.score = doc_score
                kept.append(doc)

        return kept

    def select_top(self, documents: list[Document]) -> list[Document]:
        """Sort by score, highest first, and keep the first max_results."""
        ranked = sorted(documents, key=lambda doc: doc.score, reverse=True)
        return ranked[:self.max_results]

    def build_context(self, documents: list[Document], query: str) -> str:
        """
        Render selected documents into one context block.

        Each document is cut to MAX_DOCUMENT_CHARS characters; cut
        documents end with TRUNCATION_MARKER.
        """
        lines = [
            CONTEXT_HEADER,
            f"Query: {query}",
            "",
            "Relevant content:",
            "",
        ]

        for rank, doc in enumerate(documents, start=1):
            content = doc.content
            if len(content) > MAX_DOCUMENT_CHARS:
                content = content[:MAX_DOCUMENT_CHARS] + TRUNCATION_MARKER

            lines.append(f"--- Document {rank} (relevance: {doc.score:.2f}) ---")
            lines.append(f"Source: {doc.path}")
            lines.append(content)
            lines.append("")

        lines.append(CONTEXT_FOOTER)
        lines.append(CONTEXT_INSTRUCTION)

        return "\n".join(lines) + "\n"


__all__ = [
    "Retriever",
    "Document",
    "DocumentLoader",
    "RetrievalError",
    "CorpusNotFoundError",
    "tokenize",
    "score",
]

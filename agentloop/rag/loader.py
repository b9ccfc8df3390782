"""
Document Loader
===============

Reads the knowledge base directory into Document objects.

Loading rules:
- Walk the directory tree recursively (sorted, so runs are repeatable)
- Skip directories
- Keep only files whose extension is on the allow-list
- Skip zero-length files

Documents are materialized fresh on every retrieval. Nothing is cached
between queries, so edits to the knowledge base show up immediately.
"""

from dataclasses import dataclass
from pathlib import Path

from agentloop.errors import CorpusNotFoundError, RetrievalError
from agentloop.utils.logger import Logger

logger = Logger("Loader")

DEFAULT_EXTENSIONS = (".txt", ".md", ".go")


@dataclass
class Document:
    """
    A knowledge base file considered for retrieval.

    Attributes:
        path: Where the file came from (used for citation only)
        content: The raw file text
        score: Relevance to the current query (set during scoring)
    """
    path: str
    content: str
    score: float = 0.0


class DocumentLoader:
    """
    Loads plain-text documents from a directory tree.

    Example:
        loader = DocumentLoader(Path("knowledge_base"))
        for doc in loader.load():
            print(doc.path, len(doc.content))
    """

    def __init__(
        self,
        root: Path,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ):
        """
        Args:
            root: Knowledge base directory
            extensions: Allowed file extensions, e.g. (".txt", ".md")
        """
        self.root = Path(root)
        self.extensions = tuple(ext.lower() for ext in extensions)

    def load(self) -> list[Document]:
        """
        Load every eligible document under the root.

        Returns:
            Documents in walk order

        Raises:
            CorpusNotFoundError: If the root is missing or not a directory
            RetrievalError: If an eligible file cannot be read
        """
        if not self.root.is_dir():
            raise CorpusNotFoundError(str(self.root))

        documents = []
        for path in sorted(self.root.rglob("*")):
            if not self._is_eligible(path):
                continue

            try:
                raw = path.read_bytes()
            except OSError as e:
                raise RetrievalError(f"Failed to read {path}: {e}", e)

            if not raw:
                continue

            documents.append(Document(
                path=str(path),
                content=raw.decode("utf-8", errors="replace"),
            ))

        logger.debug(f"Loaded {len(documents)} documents from {self.root}")
        return documents

    def _is_eligible(self, path: Path) -> bool:
        if path.is_dir():
            return False
        return path.suffix.lower() in self.extensions

"""
Tokenizer & Scorer
==================

Keyword relevance scoring for the local knowledge base.

Tokenization:
    Text is lower-cased and split into maximal runs of letters or
    decimal digits. Every other character (spaces, punctuation,
    underscores, symbols) ends the current token and is dropped.

        "The quick-brown fox, 2nd!"  ->  ["the", "quick", "brown", "fox", "2nd"]

Scoring a document against a query:
    Q       = query tokens (duplicates kept)
    QSet    = distinct query tokens
    freq    = token -> count in the document

    matched    = distinct tokens of Q present in the document
    base       = matched / |Q|
    freq_score = (sum of freq[t] for t in QSet) / total document tokens
    score      = 0.7 * base + 0.3 * freq_score

    An empty query scores 0 for every document. Both parts lie in
    [0, 1], so the final score does too.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

BASE_WEIGHT = 0.7
FREQUENCY_WEIGHT = 0.3


def _is_token_char(char: str) -> bool:
    return char.isalpha() or char.isdecimal()


def tokenize(text: str) -> list[str]:
    """
    Split text into lower-cased letter/digit tokens.

    Args:
        text: Raw text

    Returns:
        Tokens in order of appearance
    """
    tokens = []
    current: list[str] = []

    for char in text.lower():
        if _is_token_char(char):
            current.append(char)
        elif current:
            tokens.append("".join(current))
            current = []

    if current:
        tokens.append("".join(current))

    return tokens


def term_frequencies(tokens: Iterable[str]) -> Counter:
    """Count occurrences of each (lower-cased) token."""
    return Counter(token.lower() for token in tokens)


def score(query_tokens: Sequence[str], query_set: set[str], content: str) -> float:
    """
    Score one document against a tokenized query.

    Args:
        query_tokens: Query tokens, duplicates preserved
        query_set: Distinct lower-cased query tokens
        content: Raw document text

    Returns:
        Relevance score in [0, 1]
    """
    if not query_tokens:
        return 0.0

    content_tokens = tokenize(content)
    freq = term_frequencies(content_tokens)

    # Always true when query_set is built from query_tokens
    matched = sum(
        1 for token in {t.lower() for t in query_tokens}
        if token in query_set and freq[token] > 0
    )
    base_score = matched / len(query_tokens)

    freq_score = 0.0
    if content_tokens:
        hits = sum(count for token, count in freq.items() if token in query_set)
        freq_score = hits / len(content_tokens)

    return BASE_WEIGHT * base_score + FREQUENCY_WEIGHT * freq_score

# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Tokenization and fuzzy term matching for the search index.

The same tokenizer runs over queries and chunk content: split on
non-alphanumerics, split camelCase, lowercase, then drop short tokens
and stop words.
"""
import re

STOP_WORDS: frozenset[str] = frozenset({
    "the", "is", "at", "of", "on", "and", "a", "an", "in", "to", "for",
    "with", "by", "about", "as", "this", "that", "these", "those", "are",
    "was", "were", "be", "been", "being", "have", "has", "had", "do",
    "does", "did", "but", "if", "or", "because", "until", "while",
    # code keywords
    "function", "class", "const", "var", "let", "return", "import",
    "export", "default",
})

MIN_TOKEN_LENGTH = 3
FUZZY_MAX_DISTANCE = 2

_SPLIT_RE = re.compile(r"[^a-zA-Z0-9]+")
_CAMEL_RE = re.compile(r"([a-z])([A-Z])")


def tokenize(text: str) -> list[str]:
    """Return the ordered list of index terms in *text* (duplicates kept)."""
    tokens: list[str] = []
    for fragment in _SPLIT_RE.split(text):
        if not fragment:
            continue
        for part in _CAMEL_RE.sub(r"\1 \2", fragment).split(" "):
            lower = part.lower()
            if len(lower) >= MIN_TOKEN_LENGTH and lower not in STOP_WORDS:
                tokens.append(lower)
    return tokens


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost for insert, delete and substitute."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    # rows follow b, columns follow a
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]
    for i in range(len(b) + 1):
        matrix[i][0] = i
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(
                    matrix[i - 1][j - 1],
                    matrix[i][j - 1],
                    matrix[i - 1][j],
                )

    return matrix[len(b)][len(a)]


def is_fuzzy_match(a: str, b: str, max_distance: int = FUZZY_MAX_DISTANCE) -> bool:
    return levenshtein(a, b) <= max_distance

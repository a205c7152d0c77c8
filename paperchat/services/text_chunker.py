from __future__ import annotations

from typing import List


def chunk_text(text: str, max_length: int) -> List[str]:
    """Split text into chunks of at most ``max_length`` characters.

    Sentence boundaries (". ") are preferred; a sentence longer than the
    limit is split on spaces instead. A single word longer than the limit
    becomes its own chunk.
    """
    chunks: List[str] = []
    current = ""

    for sentence in text.split(". "):
        candidate = f"{current}. {sentence}" if current else sentence
        if len(candidate) <= max_length:
            current = candidate
            continue

        if current:
            chunks.append(current.strip())
            current = ""

        if len(sentence) <= max_length:
            current = sentence
            continue

        for word in sentence.split(" "):
            candidate = f"{current} {word}" if current else word
            if len(candidate) > max_length and current:
                chunks.append(current.strip())
                current = word
            else:
                current = candidate

    if current.strip():
        chunks.append(current.strip())

    return [c for c in chunks if c]

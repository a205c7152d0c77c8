from __future__ import annotations

from typing import Dict, List, Literal, Tuple

DocumentType = Literal["research", "manual", "report", "article", "general"]

DOCUMENT_TYPES: Tuple[str, ...] = ("research", "manual", "report", "article", "general")

# Checked in order; the first type with a matching keyword wins
_KEYWORDS: List[Tuple[DocumentType, Tuple[str, ...]]] = [
    ("research", ("research", "study", "methodology", "findings")),
    ("manual", ("manual", "guide", "instructions", "how to")),
    ("report", ("report", "analysis", "metrics", "recommendations")),
    ("article", ("article", "author", "argument", "evidence")),
]


def detect_document_type(text: str) -> DocumentType:
    lowered = (text or "").lower()
    for doc_type, keywords in _KEYWORDS:
        if any(k in lowered for k in keywords):
            return doc_type
    return "general"


def normalize_document_type(value: object) -> DocumentType:
    s = str(value).strip().lower() if value else ""
    return s if s in DOCUMENT_TYPES else "general"  # type: ignore[return-value]


# Offered when the suggestions endpoint is unavailable
STATIC_SUGGESTIONS: Dict[str, List[str]] = {
    "general": [
        "Summarize this document",
        "What are the main topics?",
        "What are the key insights?",
        "What questions does this answer?",
    ],
    "research": [
        "What are the main findings?",
        "What was the research objective?",
        "Who conducted this research?",
        "When was this published?",
    ],
    "manual": [
        "How do I get started?",
        "What are the requirements?",
        "What are the best practices?",
        "How do I troubleshoot common issues?",
    ],
    "report": [
        "What are the key metrics?",
        "What are the main recommendations?",
        "What are the conclusions?",
        "What is the scope of this report?",
    ],
    "article": [
        "What is the main argument?",
        "What evidence is provided?",
        "Who is the author?",
        "What are the conclusions?",
    ],
}

"""
Prompt construction and response parsing for suggested questions.
"""
from __future__ import annotations

import re
from typing import List

from paperchat.services.llm_client import ChatMessage

PREVIEW_CHARS = 2000
MAX_SUGGESTIONS = 6

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates relevant questions based on document content. "
    "Provide only the questions, one per line, without numbering or additional text."
)

_FOCUS = {
    "research": [
        "What are the main findings/conclusions?",
        "What methodology was used?",
        "What are the limitations?",
        "What are the implications for future research?",
        "Who conducted the study and when?",
    ],
    "manual": [
        "How do I get started?",
        "What are the requirements/prerequisites?",
        "What are the best practices?",
        "How do I troubleshoot common issues?",
        "What are the key steps or procedures?",
    ],
    "report": [
        "What are the key metrics/results?",
        "What are the main recommendations?",
        "What are the conclusions?",
        "What is the timeline or scope?",
        "What are the implications for stakeholders?",
    ],
    "article": [
        "What is the main argument or thesis?",
        "What evidence is provided?",
        "Who is the author and what are their credentials?",
        "What are the implications or conclusions?",
        "How does this relate to other research?",
    ],
}

_NUMBERED = re.compile(r"^\d+\.")


def build_prompt(text: str, document_type: str) -> str:
    base = (
        "Based on the following document content, generate 4-6 specific, relevant questions "
        "that a user might want to ask about this document. The questions should be:\n"
        "1. Directly related to the document's content\n"
        "2. Specific and actionable\n"
        "3. Cover different aspects (summary, details, implications, etc.)\n"
        "4. Written in natural, conversational language\n"
        "5. Focused on what the document actually discusses\n\n"
        f"Document type: {document_type}\n"
        f"Document content (first {PREVIEW_CHARS} characters): {text[:PREVIEW_CHARS]}\n\n"
        "Generate only the questions, one per line, without numbering or additional text."
    )
    focus = _FOCUS.get(document_type)
    if not focus:
        return base
    lines = "\n".join(f"- {q}" for q in focus)
    return f"{base}\n\nFocus on {document_type}-specific questions like:\n{lines}"


def build_messages(text: str, document_type: str) -> List[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_prompt(text, document_type)),
    ]


def parse_suggestions(raw: str) -> List[str]:
    """Split a completion into suggestions, dropping blank and numbered lines."""
    lines = [line.strip() for line in (raw or "").split("\n")]
    return [line for line in lines if line and not _NUMBERED.match(line)][:MAX_SUGGESTIONS]

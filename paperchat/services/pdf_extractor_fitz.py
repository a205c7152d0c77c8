"""
PDF text extraction using PyMuPDF (fitz).

Works on the uploaded bytes directly; nothing is written to disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF

from paperchat.core.errors import EmptyPDFError, InvalidPDFError, PasswordProtectedPDFError
from paperchat.services import log_timing

logger = logging.getLogger(__name__)


@dataclass
class ExtractedDocument:
    text: str
    pages: int


class PyMuPDFExtractor:
    """Extracts plain text and the page count from PDF bytes."""

    def extract(self, content: bytes) -> ExtractedDocument:
        with log_timing(logger, op="pdf_extract", size=len(content)) as timing:
            try:
                doc = fitz.open(stream=content, filetype="pdf")
            except Exception as e:
                logger.error("PDF parsing error: %s", e)
                raise InvalidPDFError(str(e)) from e

            try:
                if doc.needs_pass:
                    raise PasswordProtectedPDFError("PDF is password-protected")

                page_texts = [self._normalize(page.get_text("text")) for page in doc]
                pages = doc.page_count
            finally:
                doc.close()

            text = "\n\n".join(t for t in page_texts if t.strip())
            timing["pages"] = pages
            timing["chars"] = len(text)

            if not text.strip():
                raise EmptyPDFError("No text content found in PDF")

            return ExtractedDocument(text=text, pages=pages or 1)

    def _normalize(self, text: str) -> str:
        # Normalize line endings and trailing whitespace per line
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return "\n".join(line.rstrip() for line in text.split("\n")).strip()


def get_pdf_extractor() -> PyMuPDFExtractor:
    return PyMuPDFExtractor()

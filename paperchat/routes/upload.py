import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from paperchat.core.config import settings
from paperchat.core.errors import (
    ERROR_MESSAGES,
    EmptyPDFError,
    InvalidPDFError,
    PasswordProtectedPDFError,
)
from paperchat.core.validation import PDF_CONTENT_TYPE, sanitize_filename
from paperchat.models.schemas import UploadResponse
from paperchat.services.pdf_extractor_fitz import PyMuPDFExtractor, get_pdf_extractor

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 1024


def _too_large_message(size: int) -> str:
    return (
        f"File too large. Maximum size is {settings.MAX_FILE_SIZE_MB}MB. "
        f"Your file is {size / 1024 / 1024:.1f}MB."
    )


async def _read_capped(file: UploadFile, limit: int) -> bytes:
    """Read at most limit + 1 bytes, enough to tell an oversize upload apart."""
    buf = bytearray()
    while len(buf) <= limit:
        chunk = await file.read(min(READ_CHUNK_BYTES, limit + 1 - len(buf)))
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


@router.post("/upload", response_model=UploadResponse)
async def upload(file: Optional[UploadFile] = File(default=None),
                 extractor: PyMuPDFExtractor = Depends(get_pdf_extractor)) -> UploadResponse:
    """Extract the text of an uploaded PDF."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided. Please select a PDF file to upload.")

    if file.content_type != PDF_CONTENT_TYPE:
        raise HTTPException(status_code=400, detail="Invalid file type. Only PDF files are supported.")

    limit = settings.max_file_size_bytes
    if file.size is not None and file.size > limit:
        raise HTTPException(status_code=413, detail=_too_large_message(file.size))

    content = await _read_capped(file, limit)
    if len(content) > limit:
        raise HTTPException(status_code=413, detail=_too_large_message(file.size or len(content)))

    try:
        extracted = await asyncio.to_thread(extractor.extract, content)
    except PasswordProtectedPDFError:
        raise HTTPException(status_code=400, detail=ERROR_MESSAGES["PASSWORD_PROTECTED"])
    except InvalidPDFError:
        raise HTTPException(status_code=400, detail=ERROR_MESSAGES["CORRUPTED_PDF"])
    except EmptyPDFError:
        raise HTTPException(status_code=400, detail=ERROR_MESSAGES["EMPTY_PDF"])
    except Exception as e:
        logger.exception("Upload error: %s", e)
        raise HTTPException(
            status_code=500,
            detail="Unable to process this PDF. Please try a different file or contact support if the problem persists.",
        )

    if len(extracted.text) > settings.MAX_DOCUMENT_CHARS:
        raise HTTPException(status_code=400, detail=ERROR_MESSAGES["DOCUMENT_TOO_LONG"])

    return UploadResponse(
        text=extracted.text,
        pages=extracted.pages,
        filename=sanitize_filename(file.filename),
    )

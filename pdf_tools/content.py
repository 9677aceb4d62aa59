"""Text and metadata extraction using PyMuPDF."""
from __future__ import annotations
import logging
from typing import Dict, Optional

import fitz  # PyMuPDF

from config import ERROR_MESSAGES
from .document import check_pdf_bytes
from .errors import PdfDocumentError, PdfPasswordError
from .schema import PdfContent

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"

# fitz metadata keys that describe the file rather than the document
_SKIP_METADATA_KEYS = {"format", "encryption"}


def open_document(pdf_bytes: bytes, password: Optional[str] = None) -> "fitz.Document":
    check_pdf_bytes(pdf_bytes)
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['parse_failed']}: {e}")
    if doc.needs_pass:
        if not password or not doc.authenticate(password):
            doc.close()
            raise PdfPasswordError(ERROR_MESSAGES['bad_password'] if password else ERROR_MESSAGES['password_required'])
    return doc


def _metadata(doc: "fitz.Document") -> Dict[str, str]:
    meta = doc.metadata or {}
    return {k: v for k, v in meta.items() if v and k not in _SKIP_METADATA_KEYS}


def read_content(pdf_bytes: bytes, password: Optional[str] = None, include_metadata: bool = True) -> PdfContent:
    doc = open_document(pdf_bytes, password)
    try:
        page_texts = [page.get_text() for page in doc]
        return PdfContent(
            page_count=doc.page_count,
            text=PAGE_SEPARATOR.join(t.strip("\n") for t in page_texts),
            info=_metadata(doc) if include_metadata else None,
        )
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['read_failed']}: {e}")
    finally:
        doc.close()

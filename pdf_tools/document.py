"""Loading and serializing PDF documents for the form tools.

Every tool call gets its own reader/writer; nothing here is cached or shared.
"""
from __future__ import annotations
import base64
import binascii
import io
import logging
from typing import Optional

from pypdf import PasswordType, PdfReader, PdfWriter
from pypdf.generic import DictionaryObject

from config import ERROR_MESSAGES, MAX_FILE_SIZE, PDF_HEADER_SCAN_BYTES
from .errors import PdfDocumentError, PdfPasswordError, PdfPayloadError

logger = logging.getLogger(__name__)

_DATA_URL_MARKER = ";base64,"


def decode_pdf_base64(payload: str) -> bytes:
    """Decode a base64 PDF payload, tolerating data: URLs and whitespace."""
    if not isinstance(payload, str):
        raise PdfPayloadError(ERROR_MESSAGES['invalid_base64'])
    data = payload.strip()
    if data.startswith("data:") and _DATA_URL_MARKER in data:
        data = data.split(_DATA_URL_MARKER, 1)[1]
    data = "".join(data.split())
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PdfPayloadError(f"{ERROR_MESSAGES['invalid_base64']}: {e}")
    return raw


def encode_pdf_base64(pdf_bytes: bytes) -> str:
    return base64.b64encode(pdf_bytes).decode("ascii")


def check_pdf_bytes(pdf_bytes: bytes) -> None:
    if not pdf_bytes:
        raise PdfDocumentError(ERROR_MESSAGES['empty_pdf'])
    if len(pdf_bytes) > MAX_FILE_SIZE:
        raise PdfDocumentError(ERROR_MESSAGES['file_too_large'])
    if b"%PDF" not in pdf_bytes[:PDF_HEADER_SCAN_BYTES]:
        raise PdfDocumentError(ERROR_MESSAGES['not_pdf'])


def load_reader(pdf_bytes: bytes, password: Optional[str] = None) -> PdfReader:
    """Open ``pdf_bytes`` with pypdf, decrypting when needed.

    Encrypted documents are first tried with the supplied password, or with
    the empty user password when none is given.
    """
    check_pdf_bytes(pdf_bytes)
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['parse_failed']}: {e}")

    if reader.is_encrypted:
        try:
            result = reader.decrypt(password or "")
        except Exception as e:
            raise PdfDocumentError(f"{ERROR_MESSAGES['parse_failed']}: {e}")
        if result == PasswordType.NOT_DECRYPTED:
            raise PdfPasswordError(ERROR_MESSAGES['bad_password'] if password else ERROR_MESSAGES['password_required'])

    # pypdf parses lazily; touch the page tree so structural damage surfaces here
    try:
        _ = len(reader.pages)
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['parse_failed']}: {e}")
    return reader


def open_writer(pdf_bytes: bytes, password: Optional[str] = None) -> PdfWriter:
    reader = load_reader(pdf_bytes, password)
    try:
        return PdfWriter(clone_from=reader)
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['parse_failed']}: {e}")


def get_acroform(doc) -> Optional[DictionaryObject]:
    """Return the /AcroForm dictionary of a reader or writer, if any."""
    if isinstance(doc, PdfWriter):
        root = doc._root_object  # type: ignore[attr-defined]
    else:
        root = doc.trailer.get("/Root") if doc.trailer else None
        root = root.get_object() if root is not None else None
    if root is None or "/AcroForm" not in root:
        return None
    acro_form = root["/AcroForm"]
    return acro_form if isinstance(acro_form, DictionaryObject) else None


def serialize(writer: PdfWriter) -> bytes:
    bio = io.BytesIO()
    writer.write(bio)
    return bio.getvalue()

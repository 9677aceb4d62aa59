"""PDF form tool operations.

Text extraction, field listing, filling and validation for AcroForm PDFs.
"""
from .schema import FieldKind, FormField, FieldOutcome, FillResult, ValidationReport, PdfContent
from .errors import PdfToolsError, PdfPayloadError, PdfDocumentError, PdfPasswordError
from .document import decode_pdf_base64, encode_pdf_base64
from .content import read_content
from .extract import read_fields
from .fill import fill_fields, flatten_pdf, parse_field_data
from .validate import validate_fields, parse_field_names

__all__ = [
    "FieldKind",
    "FormField",
    "FieldOutcome",
    "FillResult",
    "ValidationReport",
    "PdfContent",
    "PdfToolsError",
    "PdfPayloadError",
    "PdfDocumentError",
    "PdfPasswordError",
    "decode_pdf_base64",
    "encode_pdf_base64",
    "read_content",
    "read_fields",
    "fill_fields",
    "flatten_pdf",
    "parse_field_data",
    "validate_fields",
    "parse_field_names",
]

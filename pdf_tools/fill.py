from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import fitz  # PyMuPDF
from pypdf.generic import BooleanObject, NameObject

from config import ERROR_MESSAGES
from .document import get_acroform, open_writer, serialize
from .errors import PdfDocumentError, PdfPayloadError
from .fields import FieldValueError, field_map, write_value
from .schema import FieldOutcome, FillResult

logger = logging.getLogger(__name__)

# Widgets whose appearance must be regenerated from /V before baking;
# button widgets already switch between existing appearance states via /AS.
_REGENERATE_WIDGET_TYPES = {
    fitz.PDF_WIDGET_TYPE_TEXT,
    fitz.PDF_WIDGET_TYPE_COMBOBOX,
    fitz.PDF_WIDGET_TYPE_LISTBOX,
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def fill_fields(
    pdf_bytes: bytes,
    values: Mapping[str, Any],
    password: Optional[str] = None,
    flatten: bool = False,
) -> FillResult:
    """Fill named fields; per-field problems become outcomes, not exceptions.

    Only document-level failures (unreadable bytes, wrong password, a writer
    that cannot serialize) raise.
    """
    writer = open_writer(pdf_bytes, password)
    acro_form = get_acroform(writer)
    fields = field_map(acro_form)

    outcomes: List[FieldOutcome] = []
    for name, raw_value in values.items():
        acro_field = fields.get(name)
        if acro_field is None:
            outcomes.append(FieldOutcome(name, False, f"Field '{name}' not found"))
            continue
        try:
            write_value(acro_field, _as_text(raw_value))
        except FieldValueError as e:
            outcomes.append(FieldOutcome(name, False, str(e)))
            continue
        except Exception as e:
            logger.warning("Unexpected error filling field %s", name, exc_info=True)
            outcomes.append(FieldOutcome(name, False, f"Field '{name}' could not be filled: {e}"))
            continue
        outcomes.append(FieldOutcome(name, True))

    if acro_form is not None:
        # Ensure appearance refresh in viewers
        acro_form[NameObject("/NeedAppearances")] = BooleanObject(True)

    try:
        filled = serialize(writer)
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['fill_failed']}: {e}")

    if flatten:
        filled = flatten_pdf(filled)
    return FillResult(outcomes=outcomes, pdf_bytes=filled, flattened=flatten)


def flatten_pdf(pdf_bytes: bytes) -> bytes:
    """Bake every form widget into static page content and drop the AcroForm."""
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['fill_failed']}: {e}")
    try:
        for page in doc:
            for widget in page.widgets():
                if widget.field_type not in _REGENERATE_WIDGET_TYPES:
                    continue
                try:
                    widget.update()
                except Exception:
                    logger.warning("Could not regenerate appearance for %s", widget.field_name, exc_info=True)
        doc.bake(annots=False, widgets=True)
        catalog = doc.pdf_catalog()
        if doc.xref_get_key(catalog, "AcroForm")[0] != "null":
            doc.xref_set_key(catalog, "AcroForm", "null")
        return doc.tobytes(garbage=3, deflate=True)
    except Exception as e:
        raise PdfDocumentError(f"{ERROR_MESSAGES['fill_failed']}: {e}")
    finally:
        doc.close()


def parse_field_data(field_data: Any) -> Dict[str, Any]:
    """Accept a JSON object string or an already-decoded mapping."""
    if isinstance(field_data, str):
        try:
            field_data = json.loads(field_data)
        except json.JSONDecodeError as e:
            raise PdfPayloadError(f"{ERROR_MESSAGES['bad_field_data']}: {e}")
    if not isinstance(field_data, dict):
        raise PdfPayloadError(ERROR_MESSAGES['bad_field_data'])
    return {str(k): v for k, v in field_data.items()}

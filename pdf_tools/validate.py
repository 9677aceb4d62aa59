"""Emptiness checks over a document's form fields.

validate_fields(pdf_bytes, field_names=None) partitions the checked fields into
empty and filled; None or an empty list checks every field. Names asked for
but absent from the document are counted as empty and listed separately in
``unknown_fields``.
"""
from __future__ import annotations
import json
from typing import Any, Iterable, List, Optional

from config import ERROR_MESSAGES
from .document import get_acroform, load_reader
from .errors import PdfPayloadError
from .fields import FF_REQUIRED, field_map, is_empty
from .schema import ValidationReport


def parse_field_names(field_names: Any) -> Optional[List[str]]:
    """Accept None, a list of names, or a JSON list string."""
    if field_names is None:
        return None
    if isinstance(field_names, str):
        try:
            field_names = json.loads(field_names)
        except json.JSONDecodeError as e:
            raise PdfPayloadError(f"{ERROR_MESSAGES['bad_field_names']}: {e}")
    if not isinstance(field_names, (list, tuple)):
        raise PdfPayloadError(ERROR_MESSAGES['bad_field_names'])
    names: List[str] = []
    for name in field_names:
        name = str(name)
        if name not in names:
            names.append(name)
    return names


def validate_fields(
    pdf_bytes: bytes,
    password: Optional[str] = None,
    field_names: Optional[Iterable[str]] = None,
    required_only: bool = False,
) -> ValidationReport:
    reader = load_reader(pdf_bytes, password)
    fields = field_map(get_acroform(reader))

    names = list(field_names) if field_names is not None else []
    if not names:
        names = [n for n, f in fields.items() if not required_only or f.flags & FF_REQUIRED]

    report = ValidationReport()
    for name in names:
        acro_field = fields.get(name)
        if acro_field is None:
            report.unknown_fields.append(name)
            report.empty_fields.append(name)
        elif is_empty(acro_field):
            report.empty_fields.append(name)
        else:
            report.filled_fields.append(name)
    return report

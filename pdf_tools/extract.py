from __future__ import annotations
from typing import List, Optional

from .document import get_acroform, load_reader
from .fields import describe_field, iter_fields
from .schema import FormField


def read_fields(pdf_bytes: bytes, password: Optional[str] = None) -> List[FormField]:
    """List every terminal form field in document order.

    A document without an /AcroForm simply has no fields.
    """
    reader = load_reader(pdf_bytes, password)
    return [describe_field(f) for f in iter_fields(get_acroform(reader))]

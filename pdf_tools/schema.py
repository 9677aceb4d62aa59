from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Union

FieldValue = Union[str, bool, None]


class FieldKind(str, Enum):
    """Logical kind of an AcroForm field.

    Raw /FT tokens (Tx, Btn, Ch, Sig) are mapped to these by
    ``pdf_tools.fields.classify_field``; anything the tools cannot read or
    write lands in UNSUPPORTED.
    """
    TEXT = "text"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    RADIO_GROUP = "radio_group"
    UNSUPPORTED = "unsupported"


@dataclass
class FormField:
    """Represents a single form field with normalized kind and current value."""
    name: str
    kind: FieldKind
    value: FieldValue
    raw_field_type: str  # Raw AcroForm type e.g. 'Tx', 'Btn', 'Ch'
    options: Optional[List[str]] = None  # dropdown/radio enumerations
    required: bool = False
    read_only: bool = False

    def to_public(self) -> Dict[str, Any]:  # stable outward shape
        return {
            "name": self.name,
            "type": self.kind.value,
            "value": self.value,
            "required": self.required,
            "readOnly": self.read_only,
            **({"options": self.options} if self.options is not None else {}),
        }


@dataclass
class FieldOutcome:
    name: str
    ok: bool
    error: Optional[str] = None

    def to_public(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "ok": self.ok}
        if self.error:
            out["error"] = self.error
        return out


@dataclass
class FillResult:
    outcomes: List[FieldOutcome]
    pdf_bytes: bytes
    flattened: bool = False

    @property
    def filled_fields(self) -> List[str]:
        return [o.name for o in self.outcomes if o.ok]

    @property
    def errors(self) -> List[str]:
        return [o.error for o in self.outcomes if not o.ok and o.error]


@dataclass
class ValidationReport:
    empty_fields: List[str] = field(default_factory=list)
    filled_fields: List[str] = field(default_factory=list)
    unknown_fields: List[str] = field(default_factory=list)

    @property
    def total_checked(self) -> int:
        return len(self.empty_fields) + len(self.filled_fields)

    @property
    def is_valid(self) -> bool:
        return not self.empty_fields

    def to_public(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "totalFields": self.total_checked,
            "filledCount": len(self.filled_fields),
            "emptyCount": len(self.empty_fields),
            "emptyFields": list(self.empty_fields),
            "filledFields": list(self.filled_fields),
            "unknownFields": list(self.unknown_fields),
        }


@dataclass
class PdfContent:
    page_count: int
    text: str
    info: Optional[Dict[str, str]] = None

    def to_public(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"pageCount": self.page_count, "text": self.text}
        if self.info is not None:
            out["info"] = self.info
        return out

"""Field classification and kind-specific value access for AcroForm fields.

A field is addressed by its terminal field dictionary (the node that owns /V)
plus the widget annotations that draw it. For single-widget fields the two
are the same dictionary.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pypdf.generic import ArrayObject, DictionaryObject, NameObject, TextStringObject

from config import CHECKBOX_TRUE_VALUES, DEFAULT_CHECKBOX_ON_STATE, MAX_PDF_FIELDS
from .schema import FieldKind, FieldValue, FormField

logger = logging.getLogger(__name__)

# /Ff bit positions (PDF 32000-1, tables 221, 226, 228, 230)
FF_READ_ONLY = 1 << 0
FF_REQUIRED = 1 << 1
FF_NO_TOGGLE_TO_OFF = 1 << 14
FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMBO = 1 << 17
FF_EDIT = 1 << 18

OFF_STATE = "/Off"
MAX_PARENT_DEPTH = 32


class FieldValueError(ValueError):
    """A value cannot be written to a field of this kind."""
    pass


@dataclass
class AcroField:
    name: str
    node: DictionaryObject
    widgets: List[DictionaryObject] = field(default_factory=list)

    @property
    def kind(self) -> FieldKind:
        return classify_field(self.node)

    @property
    def raw_field_type(self) -> str:
        ft = inherited(self.node, "/FT")
        return str(ft).lstrip("/") if ft is not None else "Unknown"

    @property
    def flags(self) -> int:
        return field_flags(self.node)


def resolve(obj: Any) -> Any:
    return obj.get_object() if obj is not None and hasattr(obj, "get_object") else obj


def inherited(node: DictionaryObject, key: str) -> Any:
    """Look up an inheritable field attribute (/FT, /Ff, /V, /Opt, /DA) via /Parent."""
    current = node
    depth = 0
    while current is not None and depth < MAX_PARENT_DEPTH:
        if key in current:
            return current[key]
        current = resolve(current.get("/Parent"))
        depth += 1
    return None


def field_flags(node: DictionaryObject) -> int:
    ff = inherited(node, "/Ff")
    try:
        return int(ff) if ff is not None else 0
    except (TypeError, ValueError):
        return 0


def classify_field(node: DictionaryObject) -> FieldKind:
    ft = inherited(node, "/FT")
    flags = field_flags(node)
    if ft == "/Tx":
        return FieldKind.TEXT
    if ft == "/Btn":
        if flags & FF_PUSHBUTTON:
            return FieldKind.UNSUPPORTED
        if flags & FF_RADIO:
            return FieldKind.RADIO_GROUP
        return FieldKind.CHECKBOX
    if ft == "/Ch":
        # combo boxes and list boxes both select from /Opt
        return FieldKind.DROPDOWN
    return FieldKind.UNSUPPORTED


# ---- Field tree walk ----

def iter_fields(acro_form: Optional[DictionaryObject]) -> Iterator[AcroField]:
    """Yield terminal fields in document order (depth-first over /Fields)."""
    if acro_form is None:
        return
    roots = resolve(acro_form.get("/Fields")) or ArrayObject()
    count = 0
    for ref in roots:
        for acro_field in _walk(resolve(ref), None, 0):
            if count >= MAX_PDF_FIELDS:
                logger.warning("Field cap of %d reached; remaining fields ignored", MAX_PDF_FIELDS)
                return
            count += 1
            yield acro_field


def _walk(node: Any, parent_name: Optional[str], depth: int) -> Iterator[AcroField]:
    if not isinstance(node, DictionaryObject) or depth > MAX_PARENT_DEPTH:
        return
    partial = node.get("/T")
    partial = str(resolve(partial)) if partial is not None else None
    if parent_name and partial:
        name = f"{parent_name}.{partial}"
    else:
        name = partial or parent_name

    kids = [resolve(k) for k in (resolve(node.get("/Kids")) or [])]
    kids = [k for k in kids if isinstance(k, DictionaryObject)]
    child_fields = [k for k in kids if "/T" in k]
    if child_fields:
        for child in child_fields:
            yield from _walk(child, name, depth + 1)
        return
    if not name:
        return
    widgets = kids or [node]
    yield AcroField(name=name, node=node, widgets=widgets)


# ---- Helpers for button and choice fields ----

def _appearance_states(widget: DictionaryObject) -> List[str]:
    ap = resolve(widget.get("/AP"))
    if not isinstance(ap, DictionaryObject):
        return []
    normal = resolve(ap.get("/N"))
    if not isinstance(normal, DictionaryObject):
        return []
    return [str(k) for k in normal.keys()]


def checkbox_on_state(acro_field: AcroField) -> str:
    # choose first non Off appearance as on-state
    for widget in acro_field.widgets:
        for state in _appearance_states(widget):
            if state != OFF_STATE:
                return state
    return DEFAULT_CHECKBOX_ON_STATE


def choice_options(acro_field: AcroField) -> List[Tuple[str, str]]:
    """Return (export value, display label) pairs from /Opt."""
    opts = resolve(inherited(acro_field.node, "/Opt")) or []
    pairs: List[Tuple[str, str]] = []
    for entry in opts:
        entry = resolve(entry)
        if isinstance(entry, list) and len(entry) >= 2:
            pairs.append((str(resolve(entry[0])), str(resolve(entry[1]))))
        else:
            pairs.append((str(entry), str(entry)))
    return pairs


def radio_options(acro_field: AcroField) -> List[Tuple[str, str]]:
    """Return (label, appearance state) pairs, one per distinct on-state.

    When the parent carries /Opt, kid i is labelled by /Opt[i] and its
    appearance state is usually an index such as /0.
    """
    opts = resolve(inherited(acro_field.node, "/Opt"))
    pairs: List[Tuple[str, str]] = []
    seen = set()
    for index, widget in enumerate(acro_field.widgets):
        for state in _appearance_states(widget):
            if state == OFF_STATE or state in seen:
                continue
            seen.add(state)
            label = state.lstrip("/")
            if opts is not None and index < len(opts):
                label = str(resolve(opts[index]))
            pairs.append((label, state))
    return pairs


# ---- Value access ----

def read_value(acro_field: AcroField) -> FieldValue:
    kind = acro_field.kind
    if kind is FieldKind.TEXT:
        value = resolve(inherited(acro_field.node, "/V"))
        return str(value) if value is not None else ""
    elif kind is FieldKind.CHECKBOX:
        value = resolve(inherited(acro_field.node, "/V"))
        if value is None:
            return any(str(resolve(w.get("/AS", OFF_STATE))) != OFF_STATE for w in acro_field.widgets)
        return str(value) != OFF_STATE
    elif kind is FieldKind.DROPDOWN:
        value = resolve(inherited(acro_field.node, "/V"))
        if isinstance(value, list):
            value = resolve(value[0]) if value else None
        if value is None:
            return None
        text = str(value)
        return text if text else None
    elif kind is FieldKind.RADIO_GROUP:
        value = resolve(inherited(acro_field.node, "/V"))
        if value is None or str(value) == OFF_STATE:
            return None
        state = str(value)
        for label, option_state in radio_options(acro_field):
            if option_state == state:
                return label
        return state.lstrip("/")
    elif kind is FieldKind.UNSUPPORTED:
        return None
    raise AssertionError(f"unhandled field kind {kind!r}")


def parse_checkbox_value(value: str) -> bool:
    return value.lower() in CHECKBOX_TRUE_VALUES


def write_value(acro_field: AcroField, value: str) -> None:
    """Coerce ``value`` into the field's native representation and store it.

    Raises FieldValueError when the value is not acceptable for the field.
    """
    kind = acro_field.kind
    node = acro_field.node
    if kind is FieldKind.TEXT:
        max_len = inherited(node, "/MaxLen")
        if max_len is not None and len(value) > int(max_len):
            raise FieldValueError(
                f"Value for '{acro_field.name}' exceeds the maximum length of {int(max_len)}"
            )
        node[NameObject("/V")] = TextStringObject(value)
    elif kind is FieldKind.CHECKBOX:
        state = checkbox_on_state(acro_field) if parse_checkbox_value(value) else OFF_STATE
        node[NameObject("/V")] = NameObject(state)
        for widget in acro_field.widgets:
            widget_state = state if state in _appearance_states(widget) or state == OFF_STATE else OFF_STATE
            widget[NameObject("/AS")] = NameObject(widget_state)
    elif kind is FieldKind.DROPDOWN:
        options = choice_options(acro_field)
        export = None
        for export_value, label in options:
            if value == export_value or value == label:
                export = export_value
                break
        if export is None:
            if options and not field_flags(node) & FF_EDIT:
                raise FieldValueError(f"Option '{value}' not found in dropdown '{acro_field.name}'")
            export = value
        node[NameObject("/V")] = TextStringObject(export)
        if "/I" in node:
            del node["/I"]
    elif kind is FieldKind.RADIO_GROUP:
        target = None
        for label, state in radio_options(acro_field):
            if value == label or value == state.lstrip("/"):
                target = state
                break
        if target is None:
            raise FieldValueError(f"Option '{value}' not found in radio group '{acro_field.name}'")
        node[NameObject("/V")] = NameObject(target)
        for widget in acro_field.widgets:
            widget_state = target if target in _appearance_states(widget) else OFF_STATE
            widget[NameObject("/AS")] = NameObject(widget_state)
    elif kind is FieldKind.UNSUPPORTED:
        raise FieldValueError(
            f"Field '{acro_field.name}' has unsupported type ({acro_field.raw_field_type})"
        )
    else:
        raise AssertionError(f"unhandled field kind {kind!r}")


def is_empty(acro_field: AcroField) -> bool:
    """Emptiness per kind; unsupported kinds and unreadable fields count as empty."""
    try:
        kind = acro_field.kind
        value = read_value(acro_field)
    except Exception:
        logger.debug("Could not read field %s; treating as empty", acro_field.name, exc_info=True)
        return True
    if kind is FieldKind.TEXT:
        return value is None or not str(value).strip()
    elif kind is FieldKind.CHECKBOX:
        return not value
    elif kind is FieldKind.DROPDOWN:
        return not value
    elif kind is FieldKind.RADIO_GROUP:
        return value is None
    elif kind is FieldKind.UNSUPPORTED:
        return True
    raise AssertionError(f"unhandled field kind {kind!r}")


def describe_field(acro_field: AcroField) -> FormField:
    kind = acro_field.kind
    flags = acro_field.flags
    options: Optional[List[str]] = None
    if kind is FieldKind.DROPDOWN:
        options = [export for export, _label in choice_options(acro_field)]
    elif kind is FieldKind.RADIO_GROUP:
        options = [label for label, _state in radio_options(acro_field)]
    return FormField(
        name=acro_field.name,
        kind=kind,
        value=read_value(acro_field),
        raw_field_type=acro_field.raw_field_type,
        options=options,
        required=bool(flags & FF_REQUIRED),
        read_only=bool(flags & FF_READ_ONLY),
    )


def field_map(acro_form: Optional[DictionaryObject]) -> Dict[str, AcroField]:
    """Name -> field; on duplicate names the first in document order wins."""
    mapping: Dict[str, AcroField] = {}
    for acro_field in iter_fields(acro_form):
        mapping.setdefault(acro_field.name, acro_field)
    return mapping

"""
Test Configuration

Shared fixtures: AcroForm PDFs assembled from pypdf generic objects and
plain text PDFs produced with PyMuPDF.
"""

import base64
import io

import fitz
import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

FF_READ_ONLY = 1 << 0
FF_REQUIRED = 1 << 1
FF_NO_TOGGLE_TO_OFF = 1 << 14
FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMBO = 1 << 17
FF_EDIT = 1 << 18


class FormPdfBuilder:
    """Build a one-page AcroForm PDF field by field."""

    def __init__(self):
        self.writer = PdfWriter()
        self.page = self.writer.add_blank_page(width=612, height=792)
        self.annots = ArrayObject()
        self.fields = ArrayObject()
        self._y = 760

    def _rect(self):
        self._y -= 36
        return ArrayObject([FloatObject(72), FloatObject(self._y), FloatObject(300), FloatObject(self._y + 20)])

    def _add(self, obj):
        return self.writer._add_object(obj)

    def _appearance(self):
        stream = DecodedStreamObject()
        stream.set_data(b"0 g 2 2 16 16 re f")
        stream.update({
            NameObject("/Type"): NameObject("/XObject"),
            NameObject("/Subtype"): NameObject("/Form"),
            NameObject("/BBox"): ArrayObject([FloatObject(0), FloatObject(0), FloatObject(20), FloatObject(20)]),
        })
        return self._add(stream)

    def _states(self, *states):
        normal = DictionaryObject()
        for state in states:
            normal[NameObject(state)] = self._appearance()
        return DictionaryObject({NameObject("/N"): normal})

    def _widget(self, entries):
        widget = DictionaryObject({
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/Rect"): self._rect(),
            NameObject("/F"): NumberObject(4),
        })
        widget.update(entries)
        return widget

    def _register(self, field_dict):
        ref = self._add(field_dict)
        self.fields.append(ref)
        self.annots.append(ref)
        return ref

    def text(self, name, value=None, required=False, read_only=False, max_len=None):
        flags = (FF_REQUIRED if required else 0) | (FF_READ_ONLY if read_only else 0)
        entries = {
            NameObject("/FT"): NameObject("/Tx"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/DA"): TextStringObject("/Helv 10 Tf 0 g"),
            NameObject("/Ff"): NumberObject(flags),
        }
        if value is not None:
            entries[NameObject("/V")] = TextStringObject(value)
        if max_len is not None:
            entries[NameObject("/MaxLen")] = NumberObject(max_len)
        self._register(self._widget(entries))
        return self

    def checkbox(self, name, checked=False, on_state="/Yes", required=False):
        state = on_state if checked else "/Off"
        self._register(self._widget({
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Ff"): NumberObject(FF_REQUIRED if required else 0),
            NameObject("/V"): NameObject(state),
            NameObject("/AS"): NameObject(state),
            NameObject("/AP"): self._states(on_state, "/Off"),
        }))
        return self

    def dropdown(self, name, options, value=None, edit=False):
        entries = {
            NameObject("/FT"): NameObject("/Ch"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/DA"): TextStringObject("/Helv 10 Tf 0 g"),
            NameObject("/Ff"): NumberObject(FF_COMBO | (FF_EDIT if edit else 0)),
            NameObject("/Opt"): ArrayObject([
                ArrayObject([TextStringObject(o[0]), TextStringObject(o[1])]) if isinstance(o, tuple) else TextStringObject(o)
                for o in options
            ]),
        }
        if value is not None:
            entries[NameObject("/V")] = TextStringObject(value)
        self._register(self._widget(entries))
        return self

    def radio(self, name, states, value=None):
        parent = DictionaryObject({
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Ff"): NumberObject(FF_RADIO | FF_NO_TOGGLE_TO_OFF),
            NameObject("/V"): NameObject(value or "/Off"),
        })
        parent_ref = self._add(parent)
        kids = ArrayObject()
        for state in states:
            kid = self._widget({
                NameObject("/Parent"): parent_ref,
                NameObject("/AP"): self._states(state, "/Off"),
                NameObject("/AS"): NameObject(state if state == value else "/Off"),
            })
            kid_ref = self._add(kid)
            kids.append(kid_ref)
            self.annots.append(kid_ref)
        parent[NameObject("/Kids")] = kids
        self.fields.append(parent_ref)
        return self

    def pushbutton(self, name):
        self._register(self._widget({
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Ff"): NumberObject(FF_PUSHBUTTON),
        }))
        return self

    def signature(self, name):
        self._register(self._widget({
            NameObject("/FT"): NameObject("/Sig"),
            NameObject("/T"): TextStringObject(name),
        }))
        return self

    def nested_text(self, parent_name, child_name, value=None):
        parent = DictionaryObject({NameObject("/T"): TextStringObject(parent_name)})
        parent_ref = self._add(parent)
        entries = {
            NameObject("/FT"): NameObject("/Tx"),
            NameObject("/T"): TextStringObject(child_name),
            NameObject("/Parent"): parent_ref,
            NameObject("/DA"): TextStringObject("/Helv 10 Tf 0 g"),
        }
        if value is not None:
            entries[NameObject("/V")] = TextStringObject(value)
        child_ref = self._add(self._widget(entries))
        self.annots.append(child_ref)
        parent[NameObject("/Kids")] = ArrayObject([child_ref])
        self.fields.append(parent_ref)
        return self

    def build(self, password=None) -> bytes:
        font = self._add(DictionaryObject({
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
        }))
        acro_form = DictionaryObject({
            NameObject("/Fields"): self.fields,
            NameObject("/DA"): TextStringObject("/Helv 0 Tf 0 g"),
            NameObject("/DR"): DictionaryObject({
                NameObject("/Font"): DictionaryObject({NameObject("/Helv"): font}),
            }),
        })
        self.writer._root_object[NameObject("/AcroForm")] = self._add(acro_form)
        self.page[NameObject("/Annots")] = self.annots
        if password:
            self.writer.encrypt(user_password=password, owner_password=password + "-owner")
        buf = io.BytesIO()
        self.writer.write(buf)
        return buf.getvalue()


def build_sample_form(password=None) -> bytes:
    return (
        FormPdfBuilder()
        .text("full_name", required=True)
        .text("email", value="jane@example.com")
        .text("notes", value="   ")
        .checkbox("agree", required=True)
        .checkbox("subscribed", checked=True)
        .dropdown("country", ["Canada", "France", "Japan"])
        .radio("color", ["/Red", "/Green", "/Blue"])
        .pushbutton("submit")
        .signature("signature")
        .nested_text("address", "city", value="Paris")
        .text("zip", max_len=5, read_only=True)
        .build(password=password)
    )


SAMPLE_FIELD_NAMES = [
    "full_name", "email", "notes", "agree", "subscribed", "country",
    "color", "submit", "signature", "address.city", "zip",
]


@pytest.fixture(autouse=True)
def tool_log_file(tmp_path, monkeypatch):
    """Keep the JSONL tool-call log out of the working directory."""
    import logging_utils
    path = tmp_path / "tool_calls.log"
    monkeypatch.setattr(logging_utils, "LOG_FILE", str(path))
    return path


@pytest.fixture
def form_builder():
    return FormPdfBuilder


@pytest.fixture
def sample_form_pdf() -> bytes:
    return build_sample_form()


@pytest.fixture
def encrypted_form_pdf() -> bytes:
    return build_sample_form(password="s3cret")


@pytest.fixture
def simple_form_pdf() -> bytes:
    """Only kinds that can be filled, for fill/flatten round trips."""
    return (
        FormPdfBuilder()
        .text("full_name")
        .checkbox("agree")
        .dropdown("country", ["Canada", "France", ("JP", "Japan")])
        .radio("color", ["/Red", "/Green", "/Blue"])
        .build()
    )


@pytest.fixture
def text_pdf() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Hello PDF tools")
    page = doc.new_page()
    page.insert_text((72, 72), "Second page")
    doc.set_metadata({"title": "Sample Report", "author": "QA Team"})
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def encrypted_text_pdf() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Top secret text")
    data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner-pw", user_pw="user-pw")
    doc.close()
    return data


@pytest.fixture
def b64():
    def encode(data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")
    return encode

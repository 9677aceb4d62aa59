"""
Handlers for the four PDF tools.
Each handler takes the raw tool arguments and returns a JSON-ready envelope:
{"success": true, ...result keys} or {"success": false, "error": "<message>"}.
"""

import functools
import logging
from typing import Dict, Any, Callable, Optional

from pdf_tools import (
    PdfToolsError,
    decode_pdf_base64,
    encode_pdf_base64,
    read_content,
    read_fields,
    fill_fields,
    parse_field_data,
    validate_fields,
    parse_field_names,
)
from config import ERROR_MESSAGES

logger = logging.getLogger(__name__)


def success_envelope(**data: Any) -> Dict[str, Any]:
    return {"success": True, **data}


def error_envelope(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message or "Unknown error"}


def _password(args: Dict[str, Any]) -> Optional[str]:
    password = args.get("password")
    return str(password) if password not in (None, "") else None


def _flag(args: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = args.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return bool(value)


def _guarded(fallback_key: str):
    """Collapse every failure of a handler into the flat error envelope."""
    def decorator(fn: Callable[[Dict[str, Any]], Dict[str, Any]]):
        @functools.wraps(fn)
        def wrapper(args: Dict[str, Any]) -> Dict[str, Any]:
            try:
                return fn(args or {})
            except PdfToolsError as e:
                logger.info("%s failed: %s", fn.__name__, e)
                return error_envelope(str(e))
            except Exception as e:  # noqa: BLE001
                logger.exception("%s failed unexpectedly", fn.__name__)
                return error_envelope(f"{ERROR_MESSAGES[fallback_key]}: {e}" if str(e) else ERROR_MESSAGES[fallback_key])
        return wrapper
    return decorator


@_guarded("read_failed")
def read_pdf_content(args: Dict[str, Any]) -> Dict[str, Any]:
    pdf_bytes = decode_pdf_base64(args.get("pdf_base64"))
    content = read_content(pdf_bytes, _password(args), include_metadata=_flag(args, "include_metadata", True))
    return success_envelope(**content.to_public())


@_guarded("fields_failed")
def read_pdf_fields(args: Dict[str, Any]) -> Dict[str, Any]:
    pdf_bytes = decode_pdf_base64(args.get("pdf_base64"))
    fields = read_fields(pdf_bytes, _password(args))
    return success_envelope(fieldCount=len(fields), fields=[f.to_public() for f in fields])


@_guarded("fill_failed")
def fill_pdf(args: Dict[str, Any]) -> Dict[str, Any]:
    pdf_bytes = decode_pdf_base64(args.get("pdf_base64"))
    values = parse_field_data(args.get("field_data"))
    result = fill_fields(pdf_bytes, values, _password(args), flatten=_flag(args, "flatten"))
    return success_envelope(
        filledFields=result.filled_fields,
        errors=result.errors,
        results=[o.to_public() for o in result.outcomes],
        flattened=result.flattened,
        filled_pdf_base64=encode_pdf_base64(result.pdf_bytes),
    )


@_guarded("validate_failed")
def validate_pdf(args: Dict[str, Any]) -> Dict[str, Any]:
    pdf_bytes = decode_pdf_base64(args.get("pdf_base64"))
    names = parse_field_names(args.get("field_names"))
    report = validate_fields(pdf_bytes, _password(args), names, required_only=_flag(args, "required_only"))
    return success_envelope(**report.to_public())


TOOL_HANDLERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "read_pdf_content": read_pdf_content,
    "read_pdf_fields": read_pdf_fields,
    "fill_pdf": fill_pdf,
    "validate_pdf": validate_pdf,
}

import json, time, threading, os, sys
import logging
from typing import Dict, Any, Optional

from config import LOG_FILE_TOOLS, LOG_FORMAT, LOG_LEVEL

_LOG_LOCK = threading.Lock()
LOG_FILE: Optional[str] = os.path.join(os.getcwd(), LOG_FILE_TOOLS) if LOG_FILE_TOOLS else None

# Argument keys whose values are summarized by size instead of recorded
_BULKY_ARGS = {"pdf_base64", "password"}


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging on stderr; stdout belongs to the MCP stdio transport."""
    root = logging.getLogger()
    if any(getattr(h, "_pdf_tools", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pdf_tools = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())


def summarize_args(args: Dict[str, Any]) -> Dict[str, Any]:
    summary: Dict[str, Any] = {}
    for key, value in (args or {}).items():
        if key in _BULKY_ARGS:
            summary[key] = f"<{len(value)} chars>" if isinstance(value, str) else "<redacted>"
        elif key == "field_data":
            summary[key] = f"<{len(value)} chars>" if isinstance(value, str) else f"<{len(value or {})} entries>"
        else:
            summary[key] = value
    return summary


def log_tool_call(session_id: str, tool_name: str, request: Dict[str, Any], response: Dict[str, Any], started_ts: float,
                  finished_ts: Optional[float] = None):
    if not LOG_FILE:
        return
    try:
        rec = {
            "ts": time.time(),
            "duration_ms": round(((finished_ts or time.time()) - started_ts) * 1000, 2),
            "session_id": session_id,
            "tool": tool_name,
            "request": summarize_args(request),
            "response_meta": {
                "success": response.get("success") if isinstance(response, dict) else None,
                "error": response.get("error") if isinstance(response, dict) else None,
                "filled_count": len(response.get("filledFields", [])) if isinstance(response, dict) else None,
                "field_error_count": len(response.get("errors", [])) if isinstance(response, dict) else None,
                "empty_count": response.get("emptyCount") if isinstance(response, dict) else None,
            }
        }
        line = json.dumps(rec, ensure_ascii=False, default=str)
        with _LOG_LOCK:
            with open(LOG_FILE, "a", encoding="utf-8") as f:
                f.write(line + "\n")
    except Exception:
        logging.getLogger(__name__).warning("Could not write tool call log to %s", LOG_FILE, exc_info=True)

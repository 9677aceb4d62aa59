"""
Configuration settings for the PDF form tool server.
Consolidates all constants and configuration in one place.

Every value can be overridden with a PDF_TOOLS_* environment variable.
"""
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


# Server Configuration
DEFAULT_TRANSPORT = os.getenv("PDF_TOOLS_TRANSPORT", "websocket")
TRANSPORTS = ("websocket", "stdio", "sse", "streamable-http")

WEBSOCKET_HOST = os.getenv("PDF_TOOLS_WS_HOST", "localhost")
WEBSOCKET_PORT = _env_int("PDF_TOOLS_WS_PORT", 9082)
WEBSOCKET_PING_INTERVAL = 30  # keepalive pings every 30 seconds
WEBSOCKET_PING_TIMEOUT = None  # tool calls on large documents may exceed a pong window

MCP_SERVER_NAME = "pdf-form-tools"
MCP_HOST = os.getenv("PDF_TOOLS_MCP_HOST", "127.0.0.1")
MCP_PORT = _env_int("PDF_TOOLS_MCP_PORT", 8000)

# File Upload Limits
MAX_FILE_SIZE = _env_int("PDF_TOOLS_MAX_FILE_SIZE", 10 * 1024 * 1024)  # 10MB decoded
# base64 inflates by 4/3; leave headroom for the JSON envelope
WEBSOCKET_MAX_MESSAGE_SIZE = MAX_FILE_SIZE * 2
MAX_PDF_FIELDS = 1000  # safety cap for field tree walks
PDF_HEADER_SCAN_BYTES = 1024

# Field value handling
CHECKBOX_TRUE_VALUES = {"true", "1", "yes"}
DEFAULT_CHECKBOX_ON_STATE = "/Yes"

# Logging Configuration
LOG_LEVEL = os.getenv("PDF_TOOLS_LOG_LEVEL", "INFO")
LOG_FILE_TOOLS = os.getenv("PDF_TOOLS_TOOL_LOG", "tool_calls.log")
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Error Messages
ERROR_MESSAGES = {
    'invalid_base64': 'PDF payload is not valid base64',
    'empty_pdf': 'PDF payload is empty',
    'file_too_large': f'PDF too large (>{MAX_FILE_SIZE // (1024 * 1024)}MB)',
    'not_pdf': 'Not a PDF file',
    'parse_failed': 'Failed to parse PDF',
    'password_required': 'PDF is encrypted; a password is required',
    'bad_password': 'Incorrect password for encrypted PDF',
    'bad_field_data': 'field_data must be a JSON object mapping field names to values',
    'bad_field_names': 'field_names must be a list of field names',
    'read_failed': 'Failed to read PDF',
    'fields_failed': 'Failed to read PDF fields',
    'fill_failed': 'Failed to fill PDF',
    'validate_failed': 'Failed to validate PDF',
    'unknown_tool': 'Unknown tool',
    'invalid_message': 'Message is not valid JSON',
    'unknown_message': 'Unsupported message type',
}

# Tool Declarations
_PDF_BASE64_PROPERTY = {"type": "STRING", "description": "The PDF file encoded as base64"}
_PASSWORD_PROPERTY = {"type": "STRING", "description": "Password for encrypted PDFs"}

TOOL_DESCRIPTIONS = {
    "read_pdf_content": "Extract and read all text content from a PDF file. Provide the PDF as a base64-encoded string.",
    "read_pdf_fields": "Extract all form field information from a PDF. Returns field names, types and current values.",
    "fill_pdf": "Fill a PDF form with provided data. Returns the filled PDF as base64.",
    "validate_pdf": "Check a PDF form for empty fields. Returns validation status.",
}

PDF_TOOL_DECLARATIONS = [
    {
        "name": "read_pdf_content",
        "description": TOOL_DESCRIPTIONS["read_pdf_content"],
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "pdf_base64": _PDF_BASE64_PROPERTY,
                "password": _PASSWORD_PROPERTY,
                "include_metadata": {"type": "BOOLEAN", "description": "Include document metadata (default true)"},
            },
            "required": ["pdf_base64"],
        }
    },
    {
        "name": "read_pdf_fields",
        "description": TOOL_DESCRIPTIONS["read_pdf_fields"],
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "pdf_base64": _PDF_BASE64_PROPERTY,
                "password": _PASSWORD_PROPERTY,
            },
            "required": ["pdf_base64"],
        }
    },
    {
        "name": "fill_pdf",
        "description": TOOL_DESCRIPTIONS["fill_pdf"],
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "pdf_base64": _PDF_BASE64_PROPERTY,
                "password": _PASSWORD_PROPERTY,
                "field_data": {"type": "STRING", "description": "JSON string mapping field names to values, e.g. '{\"name\": \"John\", \"date\": \"2024-01-01\"}'"},
                "flatten": {"type": "BOOLEAN", "description": "If true, make fields non-editable"},
            },
            "required": ["pdf_base64", "field_data"],
        }
    },
    {
        "name": "validate_pdf",
        "description": TOOL_DESCRIPTIONS["validate_pdf"],
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "pdf_base64": _PDF_BASE64_PROPERTY,
                "password": _PASSWORD_PROPERTY,
                "field_names": {"type": "ARRAY", "items": {"type": "STRING"}, "description": "Only check these fields (default: all fields)"},
                "required_only": {"type": "BOOLEAN", "description": "Only check fields flagged as required"},
            },
            "required": ["pdf_base64"],
        }
    },
]

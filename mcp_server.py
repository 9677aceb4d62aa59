"""
MCP server exposing the PDF tools.

Every tool returns the same JSON envelope as the WebSocket transport, as text.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from tool_response_builder import run_tool
from config import MCP_SERVER_NAME, MCP_HOST, MCP_PORT, TOOL_DESCRIPTIONS

logger = logging.getLogger(__name__)

mcp = FastMCP(MCP_SERVER_NAME, host=MCP_HOST, port=MCP_PORT)


def _call(tool_name: str, args: Dict[str, Any]) -> str:
    args = {k: v for k, v in args.items() if v is not None}
    return json.dumps(run_tool(tool_name, args, session_id="mcp"), indent=2)


@mcp.tool(name="read_pdf_content", description=TOOL_DESCRIPTIONS["read_pdf_content"])
def read_pdf_content(pdf_base64: str, password: Optional[str] = None, include_metadata: bool = True) -> str:
    return _call("read_pdf_content", {"pdf_base64": pdf_base64, "password": password,
                                      "include_metadata": include_metadata})


@mcp.tool(name="read_pdf_fields", description=TOOL_DESCRIPTIONS["read_pdf_fields"])
def read_pdf_fields(pdf_base64: str, password: Optional[str] = None) -> str:
    return _call("read_pdf_fields", {"pdf_base64": pdf_base64, "password": password})


@mcp.tool(name="fill_pdf", description=TOOL_DESCRIPTIONS["fill_pdf"])
def fill_pdf(pdf_base64: str, field_data: str, flatten: bool = False, password: Optional[str] = None) -> str:
    return _call("fill_pdf", {"pdf_base64": pdf_base64, "field_data": field_data,
                              "flatten": flatten, "password": password})


@mcp.tool(name="validate_pdf", description=TOOL_DESCRIPTIONS["validate_pdf"])
def validate_pdf(pdf_base64: str, field_names: Optional[List[str]] = None,
                 required_only: bool = False, password: Optional[str] = None) -> str:
    return _call("validate_pdf", {"pdf_base64": pdf_base64, "field_names": field_names,
                                  "required_only": required_only, "password": password})


def run_mcp_server(transport: str = "stdio"):
    logger.info("MCP server %s starting (transport=%s)", MCP_SERVER_NAME, transport)
    mcp.run(transport=transport)

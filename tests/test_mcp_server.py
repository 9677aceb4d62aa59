"""
Tests for the MCP transport.
"""

import json

import mcp_server


async def test_tools_are_registered():
    tools = await mcp_server.mcp.list_tools()
    assert sorted(t.name for t in tools) == ["fill_pdf", "read_pdf_content", "read_pdf_fields", "validate_pdf"]
    fill = next(t for t in tools if t.name == "fill_pdf")
    assert set(fill.inputSchema["required"]) == {"pdf_base64", "field_data"}


def test_tools_return_json_envelopes(simple_form_pdf, b64):
    filled = json.loads(mcp_server.fill_pdf(b64(simple_form_pdf), json.dumps({"full_name": "Jane"})))
    assert filled["success"] is True
    assert filled["filledFields"] == ["full_name"]

    report = json.loads(mcp_server.validate_pdf(filled["filled_pdf_base64"], field_names=["full_name"]))
    assert report["isValid"] is True


def test_errors_are_envelopes_too():
    result = json.loads(mcp_server.read_pdf_content("not base64!"))
    assert result["success"] is False
    assert result["error"]


def test_streamable_http_transport_available():
    # streamable-http needs the FastMCP app factory
    assert callable(getattr(mcp_server.mcp, "streamable_http_app", None))

"""
WebSocket tool-call session handling.

Wire protocol (one JSON object per message):
  client -> {"setup": {}}
  server -> {"setupComplete": {"tools": [...declarations]}}
  client -> {"toolCall": {"functionCalls": [{"name": ..., "args": {...}, "id": ...}]}}
  server -> {"toolResponse": {"functionResponses": [{"name": ..., "id": ..., "response": {...}}]}}
Anything else is answered with {"error": {"code": ..., "message": ...}} and the
connection stays open.
"""

import asyncio
import json
import logging
from typing import Dict, Any, List

import websockets

from connection_manager import ConnectionManager, SessionContext
from tool_response_builder import ToolCall, ToolCallHandler
from config import (
    WEBSOCKET_HOST, WEBSOCKET_PORT, WEBSOCKET_PING_INTERVAL, WEBSOCKET_PING_TIMEOUT,
    WEBSOCKET_MAX_MESSAGE_SIZE, PDF_TOOL_DECLARATIONS, ERROR_MESSAGES
)

logger = logging.getLogger(__name__)


def _error_message(code: str, detail: str = "") -> str:
    message = ERROR_MESSAGES.get(code, code)
    if detail:
        message = f"{message}: {detail}"
    return json.dumps({"error": {"code": code, "message": message}})


def parse_tool_calls(data: Dict[str, Any]) -> List[ToolCall]:
    function_calls = (data.get("toolCall") or {}).get("functionCalls") or []
    return [ToolCall.from_function_call(fc) for fc in function_calls if isinstance(fc, dict)]


async def handle_tool_call_message(data: Dict[str, Any], context: SessionContext) -> str:
    """Run the calls off the event loop and build the toolResponse message."""
    tool_calls = parse_tool_calls(data)
    loop = asyncio.get_running_loop()
    responses = await loop.run_in_executor(
        None, ToolCallHandler.handle_tool_calls, tool_calls, context.session_id
    )
    return json.dumps({"toolResponse": {"functionResponses": responses}})


async def tool_session_handler(context: SessionContext):
    """Serve tool calls for one client until it disconnects."""
    client_websocket = context.client_websocket
    async for message in client_websocket:
        try:
            data = json.loads(message)
        except (json.JSONDecodeError, TypeError) as e:
            await client_websocket.send(_error_message('invalid_message', str(e)))
            continue
        if not isinstance(data, dict):
            await client_websocket.send(_error_message('unknown_message'))
            continue

        if "setup" in data:
            await client_websocket.send(json.dumps({"setupComplete": {"tools": PDF_TOOL_DECLARATIONS}}))
        elif "toolCall" in data:
            await client_websocket.send(await handle_tool_call_message(data, context))
        else:
            await client_websocket.send(_error_message('unknown_message', ", ".join(sorted(data.keys()))))


def create_websocket_server(connection_manager: ConnectionManager, host: str = WEBSOCKET_HOST, port: int = WEBSOCKET_PORT):
    """Create and configure the WebSocket server (use as an async context manager)."""
    async def websocket_handler(ws, path=None):  # noqa: ANN001
        client_addr = f"{ws.remote_address[0]}:{ws.remote_address[1]}"
        await connection_manager.handle_session(ws, client_addr, tool_session_handler)

    return websockets.serve(
        websocket_handler,
        host,
        port,
        ping_interval=WEBSOCKET_PING_INTERVAL,
        ping_timeout=WEBSOCKET_PING_TIMEOUT,
        max_size=WEBSOCKET_MAX_MESSAGE_SIZE,
    )


async def run_websocket_server(host: str = WEBSOCKET_HOST, port: int = WEBSOCKET_PORT):
    connection_manager = ConnectionManager()
    async with create_websocket_server(connection_manager, host, port):
        logger.info("WebSocket tool server running on ws://%s:%d", host, port)
        try:
            await asyncio.Future()  # run forever
        finally:
            await connection_manager.shutdown_all_sessions()

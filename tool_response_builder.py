"""
Tool response builder for handling agent function calls.
Consolidates dispatch, response creation and logging for the PDF tools.
"""

import logging
import time
from typing import Dict, Any, List, Optional

from logging_utils import log_tool_call
from tool_handlers import TOOL_HANDLERS, error_envelope
from config import ERROR_MESSAGES

logger = logging.getLogger(__name__)


class ToolCall:
    """Represents a single tool call with metadata."""

    def __init__(self, name: str, args: Optional[Dict[str, Any]], call_id: Optional[str]):
        self.name = name
        self.args = args or {}
        self.call_id = call_id
        self.start_time = time.time()

    @classmethod
    def from_function_call(cls, function_call: Dict[str, Any]) -> 'ToolCall':
        """Build from a wire-level {"name", "args", "id"} mapping."""
        args = function_call.get("args")
        return cls(
            str(function_call.get("name") or ""),
            args if isinstance(args, dict) else {},
            function_call.get("id"),
        )

    def get_execution_time(self) -> float:
        """Get time elapsed since tool call started."""
        return time.time() - self.start_time


class ToolResponse:
    """Represents a tool response carrying the tool's JSON envelope."""

    def __init__(self, tool_call: ToolCall, result: Dict[str, Any]):
        self.tool_call = tool_call
        self.result = result
        self.finished_ts = time.time()

    def to_function_response(self) -> Dict[str, Any]:
        """Convert to the function response wire format."""
        response = {
            "name": self.tool_call.name,
            "response": self.result,
        }
        if self.tool_call.call_id is not None:
            response["id"] = self.tool_call.call_id
        return response

    def log_execution(self, session_id: str):
        """Log the tool call execution."""
        log_tool_call(
            session_id=session_id,
            tool_name=self.tool_call.name,
            request=self.tool_call.args,
            response=self.result,
            started_ts=self.tool_call.start_time,
            finished_ts=self.finished_ts,
        )


class ToolResponseBuilder:
    """Collects tool responses for one batch of calls and logs them."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.responses: List[ToolResponse] = []

    def add_response(self, tool_call: ToolCall, result: Dict[str, Any]) -> 'ToolResponseBuilder':
        self.responses.append(ToolResponse(tool_call, result))
        return self

    def get_function_responses(self) -> List[Dict[str, Any]]:
        return [response.to_function_response() for response in self.responses]

    def log_all_executions(self):
        """Log all tool call executions."""
        for response in self.responses:
            response.log_execution(self.session_id)

    def finalize(self) -> List[Dict[str, Any]]:
        """Log executions and return the function responses."""
        self.log_all_executions()
        return self.get_function_responses()


class ToolCallHandler:
    """Routes tool calls to the PDF tool handlers."""

    @staticmethod
    def execute(tool_call: ToolCall) -> Dict[str, Any]:
        handler = TOOL_HANDLERS.get(tool_call.name)
        if handler is None:
            return error_envelope(f"{ERROR_MESSAGES['unknown_tool']}: {tool_call.name or '<missing>'}")
        return handler(tool_call.args)

    @staticmethod
    def handle_tool_calls(tool_calls: List[ToolCall], session_id: str) -> List[Dict[str, Any]]:
        """Execute a batch of calls in order and return their function responses."""
        builder = ToolResponseBuilder(session_id)
        for tool_call in tool_calls:
            # each call is timed on its own
            tool_call.start_time = time.time()
            builder.add_response(tool_call, ToolCallHandler.execute(tool_call))
            logger.info("Tool %s finished in %.1fms (session: %s)",
                        tool_call.name, tool_call.get_execution_time() * 1000, session_id)
        return builder.finalize()


def run_tool(tool_name: str, tool_args: Dict[str, Any], session_id: str = "local") -> Dict[str, Any]:
    """Execute a single tool call and return its envelope (logged like any other call)."""
    tool_call = ToolCall(tool_name, tool_args, None)
    builder = ToolResponseBuilder(session_id)
    builder.add_response(tool_call, ToolCallHandler.execute(tool_call))
    builder.log_all_executions()
    return builder.responses[0].result

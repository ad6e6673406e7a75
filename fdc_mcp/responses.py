"""Wrap upstream payloads in MCP response envelopes.

Payloads pass through untouched: the only change is pretty-printing.
"""

import json
from typing import Any

from mcp.types import CallToolResult, TextContent

JSON_MIME_TYPE = "application/json"


def to_json_text(payload: Any) -> str:
    """Pretty-print an upstream JSON body."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def tool_success(payload: Any) -> CallToolResult:
    """Tool result carrying the upstream body as text."""
    return CallToolResult(content=[TextContent(type="text", text=to_json_text(payload))])


def tool_error(message: str) -> CallToolResult:
    """Error-flagged tool result with a human-readable message."""
    return CallToolResult(
        content=[TextContent(type="text", text=message)],
        isError=True,
    )

"""MCP protocol — framed stdio transport and the tools server."""

from kubemcp.protocols.mcp.models import (
    CallToolResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolDefinition,
)
from kubemcp.protocols.mcp.server import MCPServer
from kubemcp.protocols.mcp.transport import MessageTransport, encode_message, open_stdio_transport

__all__ = [
    "CallToolResult",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPServer",
    "MessageTransport",
    "TextContent",
    "ToolDefinition",
    "encode_message",
    "open_stdio_transport",
]

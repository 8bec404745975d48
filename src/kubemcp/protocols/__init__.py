"""Protocol layer — MCP server, tool routing, and protocol errors."""

from kubemcp.protocols.dispatcher import ToolDispatcher
from kubemcp.protocols.errors import (
    FramingError,
    InvalidRequestError,
    MessageDecodeError,
    MethodNotFoundError,
    ProtocolError,
)
from kubemcp.protocols.provider import ToolAdapter

__all__ = [
    "FramingError",
    "InvalidRequestError",
    "MessageDecodeError",
    "MethodNotFoundError",
    "ProtocolError",
    "ToolAdapter",
    "ToolDispatcher",
]

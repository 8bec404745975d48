"""MCP models — JSON-RPC 2.0 messages and tool definitions.

Implements the message format used by the Model Context Protocol for
the handshake (``initialize``), tool discovery (``tools/list``) and
execution (``tools/call``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# A string or JSON number, echoed back exactly as received.
RequestId = StrictInt | StrictFloat | StrictStr

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification.

    A message without ``id`` is a notification and never gets a response.
    """

    jsonrpc: str = "2.0"
    method: str
    id: RequestId | None = None
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: RequestId | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def failure(
        cls, request_id: RequestId | None, code: int, message: str
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with ``id`` always present and exactly one of result/error."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result if self.result is not None else {}
        return data


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A tool as advertised by ``tools/list``.

    ``namespace`` names the adapter that serves the tool; it is the routing
    key and is not part of the wire format.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    namespace: str = Field(default="", exclude=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    """A text content block inside a ``tools/call`` result."""

    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    """The ``result`` payload of ``tools/call``."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"content": [block.model_dump() for block in self.content]}
        if self.is_error:
            data["isError"] = True
        return data

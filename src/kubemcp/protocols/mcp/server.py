"""MCPServer — answers MCP JSON-RPC methods and drives the serve loop.

Handled methods:

* ``initialize`` — server identity and the tools capability.
* ``initialized`` / ``notifications/initialized`` — notification, no reply.
* ``tools/list`` — the catalog in registration order.
* ``tools/call`` — run one tool; tool failures come back as a normal
  result with ``isError: true``, never as a JSON-RPC error.

Anything else is answered with ``-32601 Method not found``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from kubemcp.protocols.errors import (
    INTERNAL_ERROR,
    InvalidRequestError,
    MessageDecodeError,
    MethodNotFoundError,
)
from kubemcp.protocols.mcp.models import (
    CallToolResult,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
    TextContent,
)
from kubemcp.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from kubemcp.protocols.dispatcher import ToolDispatcher
    from kubemcp.protocols.mcp.transport import MessageTransport
    from kubemcp.settings.models import ServerInfo

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

_NOTIFICATION_METHODS = frozenset({"initialized", "notifications/initialized"})


class MCPServer:
    """Routes JSON-RPC methods; ``tools/call`` goes through a :class:`ToolDispatcher`.

    Usage::

        server = MCPServer(dispatcher, server_info=ServerInfo())
        await server.serve(await open_stdio_transport())
    """

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        *,
        server_info: ServerInfo,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        self._dispatcher = dispatcher
        self._server_info = server_info
        self._protocol_version = protocol_version

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    async def serve(self, transport: MessageTransport) -> None:
        """Read, handle, and answer messages one at a time until input ends.

        Raises:
            FramingError: If the input stream can no longer be framed.
        """
        logger.info("Serving %s over stdio", self._server_info.name)
        while True:
            try:
                message = await transport.read_message()
            except MessageDecodeError as exc:
                logger.warning("Dropping undecodable message: %s", exc)
                await transport.write_message(
                    JsonRpcResponse.failure(None, exc.code, str(exc)).to_wire()
                )
                continue

            if message is None:
                logger.info("Input closed; shutting down")
                return

            response = await self.handle_message(message)
            if response is not None:
                await transport.write_message(response.to_wire())

    async def handle_message(self, raw: Any) -> JsonRpcResponse | None:
        """Turn one decoded message into its response, or ``None`` for notifications.

        Once a request ``id`` is known a response is always produced, even
        if handling fails unexpectedly.
        """
        request_id = raw.get("id") if isinstance(raw, dict) else None
        try:
            request = _parse_request(raw)
        except InvalidRequestError as exc:
            logger.warning("%s", exc)
            return JsonRpcResponse.failure(_echo_id(request_id), exc.code, str(exc))

        try:
            with _tracer.start_as_current_span("kubemcp.rpc") as span:
                span.set_attribute(ATTR_RPC_METHOD, request.method)
                result = await self._dispatch(request)
        except MethodNotFoundError as exc:
            if request.is_notification:
                logger.debug("Ignoring unknown notification %s", request.method)
                return None
            return JsonRpcResponse.failure(request.id, exc.code, str(exc))
        except Exception:
            logger.exception("Unhandled error while handling %s", request.method)
            if request.is_notification:
                return None
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error")

        if result is None or request.is_notification:
            return None
        return JsonRpcResponse(id=request.id, result=result)

    async def _dispatch(self, request: JsonRpcRequest) -> dict[str, Any] | None:
        method = request.method
        if method == "initialize":
            return self._initialize()
        if method in _NOTIFICATION_METHODS:
            logger.debug("Client initialized")
            return None
        if method == "tools/list":
            return self._tools_list()
        if method == "tools/call":
            return await self._tools_call(request.params)
        raise MethodNotFoundError(method)

    def _initialize(self) -> dict[str, Any]:
        return {
            "protocolVersion": self._protocol_version,
            "serverInfo": self._server_info.model_dump(),
            "capabilities": {"tools": {"listChanged": False}},
        }

    def _tools_list(self) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self._dispatcher.all_tools()]}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            name = ""
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        logger.info("tools/call %s", name)
        outcome = await self._dispatcher.execute(name, arguments)
        if outcome.is_error:
            logger.info("tools/call %s failed", name)

        result = CallToolResult(
            content=[TextContent(text=outcome.text)],
            is_error=outcome.is_error,
        )
        return result.to_wire()


def _parse_request(raw: Any) -> JsonRpcRequest:
    if not isinstance(raw, dict):
        msg = f"expected a JSON object, got {type(raw).__name__}"
        raise InvalidRequestError(msg)
    data = dict(raw)
    # A null or non-object params member is treated as absent.
    if not isinstance(data.get("params"), dict):
        data.pop("params", None)
    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError(_first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', '')}" if location else str(first.get("msg", ""))


def _echo_id(value: Any) -> RequestId | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, (int, float, str)) else None

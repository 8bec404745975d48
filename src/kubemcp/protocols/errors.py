"""Shared error types for the protocol layer."""

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR


class FramingError(ProtocolError):
    """The byte stream cannot be split into frames; the session is unusable."""


class MessageDecodeError(ProtocolError):
    """A frame was delimited correctly but its body is not valid JSON."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Parse error" + (f": {detail}" if detail else ""))


class InvalidRequestError(ProtocolError):
    """The message is JSON but not a JSON-RPC request object."""

    code = INVALID_REQUEST

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid Request" + (f": {detail}" if detail else ""))


class MethodNotFoundError(ProtocolError):
    """The requested RPC method is not served."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")

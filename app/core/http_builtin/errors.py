class HttpBuiltinError(Exception):
    """Base class for every failure of the http builtin.

    ``error_code`` and ``stage`` are class attributes so callers can branch on
    the type without parsing messages.
    """

    error_code: int = 1000
    stage: str = "execute"
    detail: str = "HTTP request failed."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.detail
        super().__init__(self.detail)

    def as_error_map(self) -> dict[str, int]:
        return {type(self).__name__: self.error_code}


class InvalidRequestSpecError(HttpBuiltinError):
    error_code = 1001
    stage = "parse"
    detail = "Invalid request specification."


class UnsupportedOptionError(HttpBuiltinError):
    error_code = 1002
    stage = "validate"
    detail = "Option unimplemented."

    def __init__(self, field: str, detail: str | None = None) -> None:
        self.field = field
        super().__init__(detail or f"Option unimplemented: {field}")


class TransportConstructionError(HttpBuiltinError):
    error_code = 1003
    stage = "transport"
    detail = "Failed to build the HTTP client."


class HeaderEncodingError(HttpBuiltinError):
    error_code = 1004
    stage = "assemble"
    detail = "Invalid header."

    def __init__(self, header: str, detail: str | None = None) -> None:
        self.header = header
        super().__init__(detail or f"Invalid header: {header!r}")


class NetworkError(HttpBuiltinError):
    error_code = 1005
    stage = "dispatch"
    detail = "Network error."

    def __init__(self, detail: str | None = None, is_timeout: bool = False) -> None:
        self.is_timeout = is_timeout
        super().__init__(detail)


class DecodeError(HttpBuiltinError):
    error_code = 1006
    stage = "decode"
    detail = "Failed to decode response body."

    def __init__(self, format: str, detail: str | None = None) -> None:
        self.format = format
        super().__init__(detail or f"Failed to decode response body as {format}")

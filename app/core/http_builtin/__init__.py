"""HTTP request builtin: validate, build transport, assemble, dispatch, decode."""

from .entities import (
    BodyFormat,
    DecodedBody,
    DurationTimeout,
    NanosecondTimeout,
    RequestSpec,
    ResponseResult,
)
from .errors import (
    DecodeError,
    HeaderEncodingError,
    HttpBuiltinError,
    InvalidRequestSpecError,
    NetworkError,
    TransportConstructionError,
    UnsupportedOptionError,
)
from .executor import HttpBuiltin, get_default_builtin, send

__all__ = [
    "BodyFormat",
    "DecodedBody",
    "DurationTimeout",
    "NanosecondTimeout",
    "RequestSpec",
    "ResponseResult",
    "DecodeError",
    "HeaderEncodingError",
    "HttpBuiltinError",
    "InvalidRequestSpecError",
    "NetworkError",
    "TransportConstructionError",
    "UnsupportedOptionError",
    "HttpBuiltin",
    "get_default_builtin",
    "send",
]

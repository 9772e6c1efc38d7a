import json
import re

import httpx

from core.http_builtin.entities import RequestSpec
from core.http_builtin.errors import HeaderEncodingError, InvalidRequestSpecError
from libs.http_client import HttpClient, Request

_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# Visible ASCII, space, tab and obs-text
_HEADER_VALUE_RE = re.compile(rb"[\t\x20-\x7e\x80-\xff]*")

JSON_CONTENT_TYPE = "application/json"


def encode_headers(headers: dict[str, str] | None) -> dict[str, str]:
    encoded: dict[str, str] = {}
    for name, value in (headers or {}).items():
        if not _HEADER_NAME_RE.fullmatch(name):
            raise HeaderEncodingError(name, f"Invalid header name: {name!r}")
        if not _HEADER_VALUE_RE.fullmatch(value.encode("utf-8")):
            raise HeaderEncodingError(name, f"Invalid value for header {name!r}")
        encoded[name] = value
    return encoded


def _has_header(headers: dict[str, str], name: str) -> bool:
    return any(key.lower() == name.lower() for key in headers)


def assemble_request(client: HttpClient, spec: RequestSpec) -> Request:
    """Turn ``spec`` into a request ready for ``client.send``. No I/O happens here."""
    try:
        url = httpx.URL(spec.url)
    except httpx.InvalidURL as exc:
        raise InvalidRequestSpecError(f"Invalid url {spec.url!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidRequestSpecError(f"Invalid url {spec.url!r}: expected an absolute http(s) url")

    headers = encode_headers(spec.headers)

    body = b""
    if spec.body is not None:
        body = json.dumps(spec.body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        if not _has_header(headers, "content-type"):
            headers["Content-Type"] = JSON_CONTENT_TYPE
    # Raw body wins when both are set; the JSON content type stays
    if spec.raw_body is not None:
        body = spec.raw_body.encode("utf-8")

    timeout = spec.timeout.seconds if spec.timeout is not None else None
    return client.build_request(
        method=spec.method,
        url=spec.url,
        headers=headers,
        body=body,
        timeout=timeout,
    )

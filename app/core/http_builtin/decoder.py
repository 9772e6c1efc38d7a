import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
import yaml

from core.http_builtin.entities import BodyFormat, DecodedBody, RequestSpec
from core.http_builtin.errors import DecodeError

logger = logging.getLogger(__name__)

MEDIA_TYPE_FORMATS: dict[str, BodyFormat] = {
    "application/json": BodyFormat.JSON,
    "application/yaml": BodyFormat.YAML,
    "application/x-yaml": BodyFormat.YAML,
}


def media_type(content_type: str | None) -> str | None:
    """Return the lower-cased media type of a Content-Type value, without parameters."""
    if content_type is None:
        return None
    essence = content_type.split(";", 1)[0].strip().lower()
    return essence or None


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON token {token!r}")


def _parse(format: BodyFormat, raw_body: str) -> Any:
    try:
        if format is BodyFormat.JSON:
            return json.loads(raw_body, parse_constant=_reject_constant)
        return yaml.safe_load(raw_body)
    except (ValueError, yaml.YAMLError) as exc:
        raise DecodeError(format.value, f"Failed to decode response body as {format.value}: {exc}") from exc


def _content_type(headers: Mapping[str, str]) -> str | None:
    # The first value wins when the header is repeated
    if isinstance(headers, httpx.Headers):
        values = headers.get_list("content-type")
        return values[0] if values else None
    for name, value in headers.items():
        if name.lower() == "content-type":
            return value
    return None


def select_format(spec: RequestSpec, headers: Mapping[str, str]) -> BodyFormat | None:
    content_type = media_type(_content_type(headers))
    if content_type is not None:
        return MEDIA_TYPE_FORMATS.get(content_type)
    if spec.force_json_decode is True:
        return BodyFormat.JSON
    if spec.force_yaml_decode is True:
        return BodyFormat.YAML
    return None


def decode_body(spec: RequestSpec, headers: Mapping[str, str], raw_body: str) -> DecodedBody | None:
    """
    Decode the response body by content type, falling back to the force flags.

    :param spec: the request that produced the response
    :param headers: response headers, looked up case-insensitively
    :param raw_body: the response text
    :return: the decoded body, or None when no decoding rule applies
    """
    if not raw_body:
        return None
    format = select_format(spec, headers)
    if format is None:
        return None
    logger.debug(f"decoding {len(raw_body)} characters as {format.value}")
    return DecodedBody(format=format, value=_parse(format, raw_body))

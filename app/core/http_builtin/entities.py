import re
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

from core.http_builtin.duration import NANOS_PER_SECOND, parse_duration
from core.http_builtin.errors import InvalidRequestSpecError

# RFC 9110 token characters
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_NANOSECONDS_RE = re.compile(r"[0-9]+")


class DurationTimeout(BaseModel):
    """Timeout given as a duration string such as ``"5s"``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["duration"] = "duration"
    text: str
    nanoseconds: int = Field(ge=0)

    @property
    def seconds(self) -> float:
        return self.nanoseconds / NANOS_PER_SECOND


class NanosecondTimeout(BaseModel):
    """Timeout given as a plain integer count of nanoseconds."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["nanoseconds"] = "nanoseconds"
    nanoseconds: int = Field(ge=0)

    @property
    def seconds(self) -> float:
        return self.nanoseconds / NANOS_PER_SECOND


Timeout = Annotated[DurationTimeout | NanosecondTimeout, Field(discriminator="kind")]


def parse_timeout(value: Any) -> DurationTimeout | NanosecondTimeout:
    """Resolve a raw timeout: duration-string syntax first, then integer nanoseconds."""
    if isinstance(value, (DurationTimeout, NanosecondTimeout)):
        return value
    if isinstance(value, bool):
        raise ValueError("timeout must be a duration string or an integer count of nanoseconds")
    if isinstance(value, str):
        try:
            return DurationTimeout(text=value, nanoseconds=parse_duration(value))
        except ValueError:
            pass
        if _NANOSECONDS_RE.fullmatch(value.strip()):
            return NanosecondTimeout(nanoseconds=int(value.strip()))
        raise ValueError(
            f"timeout {value!r} is neither a duration string nor an integer count of nanoseconds"
        )
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"timeout must not be negative, got {value}")
        return NanosecondTimeout(nanoseconds=value)
    raise ValueError("timeout must be a duration string or an integer count of nanoseconds")


class RequestSpec(BaseModel):
    """One outbound call definition.

    Accepts camelCase keys (``rawBody``, ``maxRetryAttempts``) as well as the
    field names. ``None`` means "not set" for every optional field. Instances
    are frozen and never mutated by the pipeline.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    url: str
    method: str
    body: Any = None
    raw_body: str | None = None
    headers: dict[str, str] | None = None
    enable_redirect: bool | None = None
    force_json_decode: bool | None = None
    force_yaml_decode: bool | None = None
    timeout: Timeout | None = None
    cache: bool | None = None
    force_cache: bool | None = None
    max_retry_attempts: int | None = Field(default=None, ge=0, le=2**32 - 1)

    # Declared for compatibility, rejected before any I/O
    raise_error: bool | None = None
    tls_use_system_cert: bool | None = None
    tls_ca_cert: str | None = None
    tls_ca_cert_file: str | None = None
    tls_ca_cert_env_variable: str | None = None
    tls_client_key: str | None = None
    tls_client_key_file: str | None = None
    tls_client_key_env_variable: str | None = None
    tls_insecure_skip_verify: bool | None = None
    tls_server_name: str | None = None
    caching_mode: str | None = None
    force_cache_duration_seconds: bool | None = None

    @field_validator("method", mode="before")
    @classmethod
    def _canonical_method(cls, value: Any) -> str:
        if not isinstance(value, str) or not _TOKEN_RE.fullmatch(value):
            raise ValueError(f"invalid HTTP method {value!r}")
        return value.upper()

    @field_validator("url")
    @classmethod
    def _non_empty_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value

    @field_validator("timeout", mode="before")
    @classmethod
    def _tagged_timeout(cls, value: Any) -> DurationTimeout | NanosecondTimeout | None:
        if value is None:
            return None
        return parse_timeout(value)

    @field_serializer("timeout")
    def _serialize_timeout(self, timeout: DurationTimeout | NanosecondTimeout | None) -> str | int | None:
        if timeout is None:
            return None
        if isinstance(timeout, DurationTimeout):
            return timeout.text
        return timeout.nanoseconds

    @classmethod
    def from_wire(cls, data: Any) -> "RequestSpec":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidRequestSpecError(str(exc)) from exc

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BodyFormat(StrEnum):
    JSON = "Json"
    YAML = "Yaml"


class DecodedBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: BodyFormat
    value: Any


class ResponseResult(BaseModel):
    """Normalized outcome of one execution."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    status: str
    status_code: int
    body: DecodedBody | None = None
    raw_body: str
    headers: list[tuple[str, str]] = Field(default_factory=list)
    error: dict[str, int] = Field(default_factory=dict)

    def header(self, name: str) -> str | None:
        values = self.get_all(name)
        return values[0] if values else None

    def get_all(self, name: str) -> list[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def header_map(self) -> dict[str, str | list[str]]:
        grouped: dict[str, list[str]] = {}
        for key, value in self.headers:
            grouped.setdefault(key, []).append(value)
        return {key: values[0] if len(values) == 1 else values for key, values in grouped.items()}

    def to_wire(self) -> dict[str, Any]:
        body = None
        if self.body is not None:
            body = {self.body.format.value: to_jsonable_python(self.body.value)}
        return {
            "status": self.status,
            "statusCode": self.status_code,
            "body": body,
            "rawBody": self.raw_body,
            "headers": self.header_map(),
            "error": dict(self.error),
        }

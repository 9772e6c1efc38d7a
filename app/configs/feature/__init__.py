from pydantic import Field, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """
    Configuration for application logging
    """

    LOG_LEVEL: str = Field(
        description="Logging level, default to INFO. Set to ERROR for production environments.",
        default="INFO",
    )

    LOG_FILE: str | None = Field(
        description="File path for log output.",
        default=None,
    )

    LOG_FILE_MAX_SIZE: PositiveInt = Field(
        description="Maximum file size for file rotation retention, the unit is megabytes (MB)",
        default=20,
    )

    LOG_FILE_BACKUP_COUNT: PositiveInt = Field(
        description="Maximum file backup count file rotation retention",
        default=5,
    )

    LOG_FORMAT: str = Field(
        description="Format string for log messages",
        default=(
            "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] "
            "[%(filename)s:%(lineno)d] %(trace_id)s - %(message)s"
        ),
    )

    LOG_DATEFORMAT: str | None = Field(
        description="Date format string for log timestamps",
        default=None,
    )

    LOG_TZ: str | None = Field(
        description="Timezone for log timestamps (e.g., 'America/New_York')",
        default="UTC",
    )


class HttpBuiltinConfig(BaseSettings):
    """
    Outbound request defaults for the http builtin
    """

    HTTP_BUILTIN_DEFAULT_TIMEOUT: PositiveFloat = Field(
        description="Timeout in seconds for requests that do not set one",
        default=30.0,
    )

    HTTP_BUILTIN_MAX_REDIRECTS: NonNegativeInt = Field(
        description="Maximum number of redirects followed when redirects are enabled",
        default=10,
    )

    HTTP_BUILTIN_RETRY_BACKOFF_MIN: float = Field(
        ge=0,
        description="Lower bound in seconds of the exponential retry backoff",
        default=1.0,
    )

    HTTP_BUILTIN_RETRY_BACKOFF_MAX: float = Field(
        ge=0,
        description="Upper bound in seconds of the exponential retry backoff",
        default=30.0,
    )

    HTTP_BUILTIN_CACHE_MAX_ENTRIES: PositiveInt = Field(
        description="Maximum number of responses kept in the shared response cache",
        default=1000,
    )

    HTTP_BUILTIN_CACHE_TTL: PositiveFloat | None = Field(
        description="Seconds after which cached responses are dropped regardless of their headers",
        default=None,
    )

    HTTP_BUILTIN_POOL_MAX_CONNECTIONS: PositiveInt = Field(
        description="Maximum number of concurrent connections per request client",
        default=100,
    )

    HTTP_BUILTIN_POOL_MAX_KEEPALIVE: NonNegativeInt = Field(
        description="Maximum number of persistent keep-alive connections per request client",
        default=20,
    )

    HTTP_BUILTIN_POOL_KEEPALIVE_EXPIRY: PositiveFloat = Field(
        description="Keep-alive expiry in seconds for idle connections",
        default=5.0,
    )


class FeatureConfig(
    LoggingConfig,
    HttpBuiltinConfig,
):
    pass

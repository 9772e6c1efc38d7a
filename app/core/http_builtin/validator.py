import logging

from core.http_builtin.entities import RequestSpec
from core.http_builtin.errors import UnsupportedOptionError

logger = logging.getLogger(__name__)

# (field, supported) for every optional field; unsupported ones are checked in order
OPTION_SUPPORT: tuple[tuple[str, bool], ...] = (
    ("body", True),
    ("raw_body", True),
    ("headers", True),
    ("enable_redirect", True),
    ("force_json_decode", True),
    ("force_yaml_decode", True),
    ("timeout", True),
    ("cache", True),
    ("force_cache", True),
    ("max_retry_attempts", True),
    ("raise_error", False),
    ("tls_ca_cert", False),
    ("tls_client_key", False),
    ("tls_server_name", False),
    ("tls_use_system_cert", False),
    ("tls_ca_cert_file", False),
    ("tls_client_key_file", False),
    ("tls_ca_cert_env_variable", False),
    ("tls_client_key_env_variable", False),
    ("tls_insecure_skip_verify", False),
    ("caching_mode", False),
    ("force_cache_duration_seconds", False),
)

UNSUPPORTED_OPTIONS: tuple[str, ...] = tuple(
    name for name, supported in OPTION_SUPPORT if not supported
)


def check_supported_options(spec: RequestSpec) -> None:
    """Reject ``spec`` if it sets any option that is declared but not implemented."""
    for name in UNSUPPORTED_OPTIONS:
        if getattr(spec, name) is not None:
            alias = RequestSpec.model_fields[name].alias or name
            logger.warning(f"rejecting request to {spec.url}: option {alias} is unimplemented")
            raise UnsupportedOptionError(alias)

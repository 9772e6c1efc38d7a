from core.http_builtin import HttpBuiltin, get_default_builtin


def get_http_builtin() -> HttpBuiltin:
    return get_default_builtin()

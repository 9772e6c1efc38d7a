import logging
from time import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from extensions.ext_logging import trace_id_generator, trace_id_var
from libs.helper import extract_remote_ip

logger = logging.getLogger(__name__)


class CustomMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id to every request and logs its timing."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        trace_id = request.headers.get("x-trace-id") or trace_id_generator()

        ip = extract_remote_ip(request)
        path = request.url
        trace_id_var.set(trace_id)
        logger.info(f"| {ip} | {request.method} {path}")
        start_time = time()
        response = await call_next(request)
        process_time = round(time() - start_time, 4)
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Trace-ID"] = trace_id
        logger.info(f"| {ip} | {request.method} {path} | process_time={process_time}s")
        return response

from typing import Any

from fastapi import APIRouter, Body, Depends

from core.http_builtin import HttpBuiltin, RequestSpec
from dependencies.http_builtin import get_http_builtin
from schemas.response import ApiResponse

router = APIRouter(prefix="/builtins")


@router.post("/http/send")
async def http_send(
    payload: dict[str, Any] = Body(...),
    builtin: HttpBuiltin = Depends(get_http_builtin),
):
    """Execute one outbound HTTP request described by the payload"""
    spec = RequestSpec.from_wire(payload)
    result = await builtin.execute(spec)
    return ApiResponse(data=result.to_wire())

import os

from fastapi import APIRouter

from configs import app_config
from schemas.response import ApiResponse

router = APIRouter()


@router.get("/health")
async def health():
    return ApiResponse(
        data={
            "pid": os.getpid(),
            "status": "ok",
            "version": app_config.CURRENT_VERSION,
        }
    )

from enum import IntEnum


class ResponseCode(IntEnum):
    SUCCESS = 0
    FAIL = 1
    BAD_REQUEST = 400
    UNPROCESSABLE_ENTITY = 422
    BAD_GATEWAY = 502

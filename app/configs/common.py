from pydantic import Field
from pydantic_settings import BaseSettings


class CommonConfig(BaseSettings):
    PROJECT_NAME: str = Field(
        description="Name reported by the host surface",
        default="http-builtin",
    )

    DEBUG: bool = Field(
        description="Enable debug mode: extension load timings and exception details in error replies",
        default=False,
    )

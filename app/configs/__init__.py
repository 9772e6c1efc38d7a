from pydantic_settings import SettingsConfigDict

from configs.common import CommonConfig
from configs.feature import FeatureConfig, HttpBuiltinConfig, LoggingConfig
from configs.packaging import PackagingInfo


class AppConfig(CommonConfig, FeatureConfig, PackagingInfo):
    model_config = SettingsConfigDict(
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


app_config: AppConfig = AppConfig()

__all__ = ["AppConfig", "HttpBuiltinConfig", "LoggingConfig", "app_config"]

"""配置管理模块。

使用 Pydantic 加载和验证环境变量。
"""

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 加载 .env 文件
load_dotenv()


class Settings(BaseSettings):
    """应用配置。

    从环境变量加载配置，使用 Pydantic 进行验证。
    """

    # 服务配置
    port: int = Field(default=9876, ge=1, le=65535, description="HTTP 服务端口")

    # 数字窗口配置
    window_size: int = Field(default=10, ge=1, description="滑动窗口容量")
    number_server_url: str = Field(
        default="http://localhost:8080",
        description="数字生成服务基础地址"
    )
    number_fetch_timeout_ms: int = Field(
        default=500, ge=1, description="单次抓取的时间预算（毫秒）"
    )
    primes_endpoint: str = Field(default="/primes", description="质数端点")
    fibonacci_endpoint: str = Field(default="/fibo", description="斐波那契端点")
    even_endpoint: str = Field(default="/even", description="偶数端点")
    random_endpoint: str = Field(default="/rand", description="随机数端点")

    # 社交分析配置
    social_api_base_url: str = Field(
        default="http://localhost:8080",
        description="社交数据服务基础地址"
    )
    analytics_cache_ttl_seconds: float = Field(
        default=60.0, gt=0, description="数据集缓存有效期（秒）"
    )

    # 上游认证凭证
    auth_email: str = Field(default="", description="注册邮箱")
    auth_name: str = Field(default="", description="注册姓名")
    auth_roll_no: str = Field(default="", description="学号")
    auth_access_code: str = Field(default="", description="访问码")
    auth_client_id: str = Field(default="", description="客户端 ID")
    auth_client_secret: str = Field(default="", description="客户端密钥")

    # 日志配置
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="日志级别",
        validate_default=True,  # 确保默认值也经过验证
    )

    # 监控配置
    prometheus_enabled: bool = Field(
        default=True, description="是否启用 Prometheus 监控"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证并标准化日志级别。"""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("number_server_url", "social_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """去除基础地址末尾的斜杠，避免拼接出双斜杠。"""
        return v.rstrip("/")

    def auth_payload(self) -> dict[str, str]:
        """构造上游认证接口所需的凭证载荷。"""
        return {
            "email": self.auth_email,
            "name": self.auth_name,
            "rollNo": self.auth_roll_no,
            "accessCode": self.auth_access_code,
            "clientID": self.auth_client_id,
            "clientSecret": self.auth_client_secret,
        }


# 全局缓存，用于测试时清除
_settings_cache: Settings | None = None


def get_settings() -> Settings:
    """获取配置单例。

    使用全局缓存确保配置只加载一次。

    Returns:
        Settings: 配置实例
    """
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = Settings()
    return _settings_cache


def clear_settings_cache() -> None:
    """清除配置缓存。

    主要用于测试场景。
    """
    global _settings_cache
    _settings_cache = None

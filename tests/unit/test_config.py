"""测试配置模块。"""

import pytest
from pydantic import ValidationError


def test_config_defaults(monkeypatch):
    """测试未设置环境变量时的默认值。"""
    from src.config import Settings

    for key in ("WINDOW_SIZE", "NUMBER_FETCH_TIMEOUT_MS", "ANALYTICS_CACHE_TTL_SECONDS", "PORT"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert settings.window_size == 10
    assert settings.number_fetch_timeout_ms == 500
    assert settings.analytics_cache_ttl_seconds == 60
    assert settings.port == 9876
    assert settings.primes_endpoint == "/primes"
    assert settings.fibonacci_endpoint == "/fibo"
    assert settings.even_endpoint == "/even"
    assert settings.random_endpoint == "/rand"


def test_config_loads_from_env(monkeypatch):
    """测试从环境变量加载配置。"""
    from src.config import clear_settings_cache, get_settings

    clear_settings_cache()
    monkeypatch.setenv("WINDOW_SIZE", "3")
    monkeypatch.setenv("NUMBER_SERVER_URL", "http://numbers.test/")
    monkeypatch.setenv("SOCIAL_API_BASE_URL", "http://social.test")
    monkeypatch.setenv("AUTH_EMAIL", "me@example.com")
    monkeypatch.setenv("AUTH_CLIENT_ID", "client-1")

    settings = get_settings()

    assert settings.window_size == 3
    assert settings.number_server_url == "http://numbers.test"
    assert settings.social_api_base_url == "http://social.test"
    payload = settings.auth_payload()
    assert payload["email"] == "me@example.com"
    assert payload["clientID"] == "client-1"
    assert set(payload) == {"email", "name", "rollNo", "accessCode", "clientID", "clientSecret"}


def test_config_rejects_zero_window(monkeypatch):
    """测试窗口大小必须大于 0。"""
    from src.config import Settings

    monkeypatch.setenv("WINDOW_SIZE", "0")

    with pytest.raises(ValidationError) as exc_info:
        Settings()

    error_fields = {e["loc"][0] for e in exc_info.value.errors()}
    assert "window_size" in error_fields


def test_config_validation_error_when_invalid_log_level(monkeypatch):
    """测试无效日志级别时抛出验证错误。"""
    from src.config import Settings

    monkeypatch.setenv("LOG_LEVEL", "INVALID")

    with pytest.raises(ValidationError) as exc_info:
        Settings()

    error_fields = {e["loc"][0] for e in exc_info.value.errors()}
    assert "log_level" in error_fields


def test_config_log_level_case_insensitive(monkeypatch):
    """测试日志级别不区分大小写（会被转换为大写）。"""
    from src.config import clear_settings_cache, get_settings

    clear_settings_cache()
    monkeypatch.setenv("LOG_LEVEL", "warning")

    assert get_settings().log_level == "WARNING"


def test_config_singleton():
    """测试配置单例模式。"""
    from src.config import clear_settings_cache, get_settings

    clear_settings_cache()

    assert get_settings() is get_settings()

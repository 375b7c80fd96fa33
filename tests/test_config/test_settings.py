"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

import pytest

from config.settings import (
    BaseSettings,
    ProxySettings,
    RegistrySettings,
    SyncSettings,
    WhatsAppSettings,
    get_base_settings,
    get_proxy_settings,
    get_registry_settings,
    get_sync_settings,
    get_whatsapp_settings,
)


class TestBaseSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ENVIRONMENT", "SERVICE_NAME", "PORT", "REDIS_URL", "DEBUG"):
            monkeypatch.delenv(name, raising=False)

        settings = get_base_settings()

        assert settings.environment == "development"
        assert settings.service_name == "phone-proxy-router"
        assert settings.port == 3500
        assert settings.is_development is True
        assert settings.validate() == []

    @pytest.mark.parametrize(("raw", "expected"), [("prod", "production"), ("STAGE", "staging"), ("x", "development")])
    def test_environment_aliases(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)
        assert get_base_settings().environment == expected

    def test_invalid_port(self) -> None:
        assert BaseSettings(port=70000).validate() == ["PORT inválida: 70000"]

    def test_cached(self) -> None:
        assert get_base_settings() is get_base_settings()


class TestProxySettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROXY_ROUTE_PREFIX", "/api/proxy/")
        monkeypatch.setenv("PROXY_PHONE_HEADER", "X-Phone")
        monkeypatch.setenv("PROXY_REQUEST_TIMEOUT_SECONDS", "5")

        settings = get_proxy_settings()

        assert settings.route_prefix == "/api/proxy"
        assert settings.phone_header == "x-phone"
        assert settings.request_timeout_seconds == 5.0

    def test_validate(self) -> None:
        assert ProxySettings().validate() == []
        errors = ProxySettings(route_prefix="proxy", request_timeout_seconds=0).validate()
        assert len(errors) == 2


class TestWhatsAppSettings:
    def test_missing_verify_token_is_reported(self) -> None:
        assert "WHATSAPP_VERIFY_TOKEN não configurado" in WhatsAppSettings().validate()

    def test_webhook_path_trailing_slash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WHATSAPP_WEBHOOK_PATH", "/hooks/wa/")
        assert get_whatsapp_settings().webhook_path == "/hooks/wa"


class TestRegistrySettings:
    def test_unknown_backend_falls_back_to_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REGISTRY_BACKEND", "mongo")
        assert get_registry_settings().backend == "file"

    def test_memory_forbidden_outside_development(self) -> None:
        errors = RegistrySettings(backend="memory").validate(BaseSettings(environment="production"))
        assert errors == ["REGISTRY_BACKEND=memory proibido em staging/production"]
        assert RegistrySettings(backend="memory").validate(BaseSettings()) == []

    def test_redis_requires_url(self) -> None:
        settings = RegistrySettings(backend="redis")
        assert settings.validate(BaseSettings()) == ["REGISTRY_BACKEND=redis requer REDIS_URL configurado"]
        assert settings.validate(BaseSettings(redis_url="redis://localhost:6379/0")) == []


class TestSyncSettings:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SYNC_ENABLED", "true")
        monkeypatch.setenv("SYNC_SOURCE_URL", "https://config.example/routes")
        monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "60")

        settings = get_sync_settings()

        assert settings.enabled is True
        assert settings.is_configured is True
        assert settings.interval_seconds == 60.0
        assert settings.validate() == []

    def test_enabled_without_source(self) -> None:
        assert SyncSettings(enabled=True).validate() == ["SYNC_ENABLED requer SYNC_SOURCE_URL"]
        assert SyncSettings(interval_seconds=0).validate() == ["SYNC_INTERVAL_SECONDS deve ser > 0"]

"""Tests for environment-driven Settings (config.py)."""

import pytest
from pydantic import ValidationError

from xaiclient.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("XAI_API_KEY", "XAI_BASE_URL", "XAI_TIMEOUT_SECONDS", "XAI_MAX_ATTEMPTS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_key is None
        assert settings.base_url == "https://api.x.ai"
        assert settings.timeout_seconds == 60
        assert settings.max_attempts == 1
        assert settings.otel_exporter_otlp_endpoint is None

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XAI_API_KEY", "xai-secret")
        monkeypatch.setenv("XAI_TIMEOUT_SECONDS", "15")
        monkeypatch.setenv("xai_max_attempts", "3")

        settings = Settings(_env_file=None)

        assert settings.api_key is not None
        assert settings.api_key.get_secret_value() == "xai-secret"
        assert settings.timeout_seconds == 15
        assert settings.max_attempts == 3

    def test_api_key_hidden_in_repr(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XAI_API_KEY", "xai-secret")
        assert "xai-secret" not in repr(Settings(_env_file=None))

    def test_reads_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:  # type: ignore[no-untyped-def]
        monkeypatch.delenv("XAI_API_KEY", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("XAI_API_KEY=xai-from-file\nOTHER_TOOL_SETTING=ignored\n")

        settings = Settings(_env_file=env_file)

        assert settings.api_key is not None
        assert settings.api_key.get_secret_value() == "xai-from-file"

    @pytest.mark.parametrize(
        ("name", "value"), [("XAI_TIMEOUT_SECONDS", "0"), ("XAI_MAX_ATTEMPTS", "0")]
    )
    def test_rejects_out_of_range(
        self, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

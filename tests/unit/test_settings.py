import pytest
from pydantic import ValidationError

from editorsync.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_autosave_intervals(self) -> None:
        s = Settings()
        assert s.autosave_debounce_seconds == 60.0
        assert s.autosave_max_wait_seconds == 300.0

    def test_default_upload_limits(self) -> None:
        s = Settings()
        assert s.upload_timeout_seconds == 30.0
        assert s.upload_max_width == 1200
        assert s.upload_max_size_mb == 2.0

    def test_default_scan_settings(self) -> None:
        s = Settings()
        assert s.scan_timeout_seconds == 10.0
        assert s.scan_concurrency == 1

    def test_default_draft_store(self) -> None:
        s = Settings()
        assert s.draft_store == "file"
        assert s.recovery_tolerance_seconds == 5.0


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_api_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "https://bridge.example.com")
        s = Settings()
        assert s.api_base_url == "https://bridge.example.com"

    def test_loads_debounce(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOSAVE_DEBOUNCE_SECONDS", "2.5")
        s = Settings()
        assert s.autosave_debounce_seconds == 2.5

    def test_loads_scan_concurrency(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCAN_CONCURRENCY", "4")
        s = Settings()
        assert s.scan_concurrency == 4


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPLOAD_TIMEOUT_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings()

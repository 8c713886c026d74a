from pathlib import Path

import pytest

from billscan.runtime.settings import OCRSettings, get_settings, load_settings, reset_settings


def test_defaults_without_config_or_env() -> None:
    settings = load_settings(environ={})

    assert settings == OCRSettings()
    assert settings.max_attempts == 2
    assert settings.retry_delay == 2.0


def test_toml_file_overrides_defaults(tmp_path: Path) -> None:
    config = tmp_path / "billscan.toml"
    config.write_text('[ocr]\nlanguage = "hin"\nmax_attempts = 3\ntimeout = 10\nunknown = 1\n')

    settings = load_settings(environ={"BILLSCAN_CONFIG": str(config)})

    assert settings.language == "hin"
    assert settings.max_attempts == 3
    assert settings.timeout == 10.0
    assert isinstance(settings.timeout, float)


def test_env_overrides_toml(tmp_path: Path) -> None:
    config = tmp_path / "billscan.toml"
    config.write_text("[ocr]\nmax_attempts = 3\n")

    settings = load_settings(
        config_path=str(config),
        environ={"BILLSCAN_OCR_MAX_ATTEMPTS": "5", "BILLSCAN_OCR_URL": "http://localhost:8001/ocr"},
    )

    assert settings.max_attempts == 5
    assert settings.url == "http://localhost:8001/ocr"


def test_missing_config_file_keeps_defaults(tmp_path: Path) -> None:
    assert load_settings(config_path=str(tmp_path / "missing.toml"), environ={}) == OCRSettings()


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValueError, match="timeout"):
        load_settings(environ={"BILLSCAN_OCR_TIMEOUT": "soon"})
    with pytest.raises(ValueError, match="max_attempts"):
        load_settings(environ={"BILLSCAN_OCR_MAX_ATTEMPTS": "0"})


def test_get_settings_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BILLSCAN_OCR_LANGUAGE", "tam")
    reset_settings()
    first = get_settings()

    monkeypatch.setenv("BILLSCAN_OCR_LANGUAGE", "kan")
    assert get_settings() is first

    reset_settings()
    assert get_settings().language == "kan"

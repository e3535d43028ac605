from makeover.config import DEFAULT_MODEL, DEFAULT_TIMEOUT, Settings


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "abc")
    monkeypatch.setenv("GEMINI_IMAGE_MODEL", "gemini-test-image")
    monkeypatch.setenv("GEMINI_API_BASE", "http://localhost:9000/v1/")
    monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "15")

    settings = Settings.from_env()

    assert settings.has_key
    assert settings.timeout == 15.0
    assert settings.endpoint == "http://localhost:9000/v1/models/gemini-test-image:generateContent"


def test_settings_defaults_without_environment(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_IMAGE_MODEL", "GEMINI_API_BASE", "GEMINI_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.api_key is None
    assert not settings.has_key
    assert settings.model == DEFAULT_MODEL
    assert settings.timeout == DEFAULT_TIMEOUT


def test_bad_timeout_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "soon")
    assert Settings.from_env().timeout == DEFAULT_TIMEOUT

"""Settings loading."""

from fintrack.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.api_base_url == "http://localhost:3000"
    assert settings.fetch_page_size == 500
    assert settings.http_timeout is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FINTRACK_API_BASE_URL", "https://finance.example.com")
    monkeypatch.setenv("FINTRACK_FETCH_PAGE_SIZE", "250")
    monkeypatch.setenv("FINTRACK_HTTP_TIMEOUT", "12.5")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://finance.example.com"
    assert settings.fetch_page_size == 250
    assert settings.http_timeout == 12.5

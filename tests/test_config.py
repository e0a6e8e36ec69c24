from src.sharai_client import config


def test_load_settings_defaults(monkeypatch):
    for var in (
        "SHARAI_API_URL",
        "SHARAI_API_TIMEOUT",
        "SHARAI_IMPORT_BATCH_SIZE",
        "SHARAI_THEME",
        "SHARAI_ADMIN_USERNAME",
        "SHARAI_ADMIN_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)

    settings = config.load_settings()

    assert settings.api_url == "http://localhost:5000"
    assert settings.api_timeout == 30.0
    assert settings.import_batch_size == 50
    assert settings.theme is None
    assert settings.admin_username is None


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("SHARAI_API_URL", "https://qa.example.org")
    monkeypatch.setenv("SHARAI_API_TIMEOUT", "5.5")
    monkeypatch.setenv("SHARAI_IMPORT_BATCH_SIZE", "25")
    monkeypatch.setenv("SHARAI_THEME", "light")

    settings = config.load_settings()

    assert settings.api_url == "https://qa.example.org"
    assert settings.api_timeout == 5.5
    assert settings.import_batch_size == 25
    assert settings.theme == "light"


def test_malformed_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("SHARAI_API_TIMEOUT", "soon")
    monkeypatch.setenv("SHARAI_IMPORT_BATCH_SIZE", "-3")

    settings = config.load_settings()

    assert settings.api_timeout == 30.0
    assert settings.import_batch_size == 50

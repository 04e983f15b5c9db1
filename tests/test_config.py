import logging

from finalerts import config


def test_defaults(monkeypatch):
    for name in ("FINALERTS_SEED_PATH", "FINALERTS_FETCH_TIMEOUT", "FINALERTS_LOG_LEVEL", "FINALERTS_UPCOMING_DAYS"):
        monkeypatch.delenv(name, raising=False)
    assert config.seed_path() == "data/seed.json"
    assert config.fetch_timeout() == 5.0
    assert config.log_level() == "INFO"
    assert config.upcoming_days() == 30


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FINALERTS_SEED_PATH", "/tmp/snap.json")
    monkeypatch.setenv("FINALERTS_FETCH_TIMEOUT", "1.5")
    monkeypatch.setenv("FINALERTS_LOG_LEVEL", "debug")
    monkeypatch.setenv("FINALERTS_UPCOMING_DAYS", "14")
    assert config.seed_path() == "/tmp/snap.json"
    assert config.fetch_timeout() == 1.5
    assert config.log_level() == "DEBUG"
    assert config.upcoming_days() == 14


def test_bad_numbers_fall_back(monkeypatch, caplog):
    monkeypatch.setenv("FINALERTS_FETCH_TIMEOUT", "soon")
    monkeypatch.setenv("FINALERTS_UPCOMING_DAYS", "-3")
    with caplog.at_level(logging.WARNING):
        assert config.fetch_timeout() == 5.0
        assert config.upcoming_days() == 30
    assert "FINALERTS_FETCH_TIMEOUT" in caplog.text


def test_load_env_reads_dotenv_file(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FINALERTS_UPCOMING_DAYS=9\nFINALERTS_LOG_LEVEL=warning\n", encoding="utf-8")
    # registered so the values load_env writes are undone after the test
    monkeypatch.setenv("FINALERTS_UPCOMING_DAYS", "")
    monkeypatch.delenv("FINALERTS_UPCOMING_DAYS")
    monkeypatch.setenv("FINALERTS_LOG_LEVEL", "error")

    assert config.load_env(str(env_file)) is True
    assert config.upcoming_days() == 9
    # variables already in the environment are not overridden
    assert config.log_level() == "ERROR"

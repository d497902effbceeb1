from pathlib import Path

from cardwise.application.config import AppConfig, resolve_config


def test_defaults_live_under_home(mock_home):
    config = resolve_config()
    assert config.data_file == mock_home / ".config/cardwise/cards.json"
    assert config.log_dir == mock_home / ".config/cardwise/logs"
    assert config.source_file is None
    assert config.mature_interval == 30


def test_env_overrides(mock_home, tmp_path, monkeypatch):
    monkeypatch.setenv("CARDWISE_DATA_FILE", str(tmp_path / "x.json"))
    monkeypatch.setenv("CARDWISE_MATURE_INTERVAL", "21")
    config = resolve_config()
    assert config.data_file == tmp_path / "x.json"
    assert config.mature_interval == 21


def test_toml_file(mock_home, tmp_path):
    cfg = mock_home / ".config/cardwise/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(f'source_file = "{tmp_path / "deck.csv"}"\nport = 9001\n', encoding="utf-8")

    config = resolve_config()

    assert config.source_file == tmp_path / "deck.csv"
    assert config.port == 9001


def test_priority_cli_over_env_over_file(mock_home, monkeypatch):
    cfg = mock_home / ".config/cardwise/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text("port = 9001\nhost = \"0.0.0.0\"\nmature_interval = 10\n", encoding="utf-8")
    monkeypatch.setenv("CARDWISE_PORT", "9002")
    monkeypatch.setenv("CARDWISE_HOST", "localhost")

    config = resolve_config({"port": 9003, "host": None})

    assert config.port == 9003
    assert config.host == "localhost"
    assert config.mature_interval == 10


def test_paths_are_expanded(mock_home):
    config = AppConfig(data_file="~/cards.json")
    assert config.data_file == Path(mock_home / "cards.json").resolve()

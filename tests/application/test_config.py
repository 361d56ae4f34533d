from pathlib import Path

from flashstudy.application.config import AppConfig, resolve_config


def test_defaults_live_under_home(mock_home):
    config = resolve_config()
    data_dir = (mock_home / ".local/share/flashstudy").resolve()
    assert config.data_dir == data_dir
    assert config.db_path == data_dir / "flashstudy.db"
    assert config.prefs_path == data_dir / "preferences.json"
    assert config.verbose == 0


def test_toml_file_is_read(mock_home, tmp_path):
    cfg = mock_home / ".config/flashstudy/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(f'data_dir = "{tmp_path / "from_toml"}"\nverbose = 2\n')

    config = resolve_config()

    assert config.data_dir == (tmp_path / "from_toml").resolve()
    assert config.verbose == 2


def test_home_dotfile_is_used_as_fallback(mock_home, tmp_path):
    (mock_home / ".flashstudy.toml").write_text(f'db_path = "{tmp_path / "x.db"}"\n')
    assert resolve_config().db_path == (tmp_path / "x.db").resolve()


def test_env_overrides_toml(mock_home, tmp_path, monkeypatch):
    (mock_home / ".flashstudy.toml").write_text(f'data_dir = "{tmp_path / "toml"}"\n')
    monkeypatch.setenv("FLASHSTUDY_DATA_DIR", str(tmp_path / "env"))
    assert resolve_config().data_dir == (tmp_path / "env").resolve()


def test_cli_overrides_env(mock_home, tmp_path, monkeypatch):
    monkeypatch.setenv("FLASHSTUDY_DATA_DIR", str(tmp_path / "env"))
    config = resolve_config({"data_dir": tmp_path / "cli", "verbose": None})
    assert config.data_dir == (tmp_path / "cli").resolve()
    assert config.db_path == (tmp_path / "cli").resolve() / "flashstudy.db"


def test_explicit_db_path_is_kept(mock_home, tmp_path):
    config = resolve_config({"db_path": tmp_path / "custom.db"})
    assert config.db_path == (tmp_path / "custom.db").resolve()
    assert config.prefs_path.name == "preferences.json"


def test_tilde_is_expanded(mock_home):
    config = AppConfig(data_dir="~/cards")
    assert config.data_dir == Path(mock_home / "cards").resolve()

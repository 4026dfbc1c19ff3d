"""Tests for layered configuration resolution."""

from pathlib import Path

from flashdeck.application.config import AppConfig, resolve_config


def test_defaults(mock_home):
    config = resolve_config()
    assert config.decks_root == Path(mock_home) / ".local/share/flashdeck/decks"
    assert config.strict_reviews is False
    assert config.verbose == 1


def test_env_overrides_defaults(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("FLASHDECK_DECKS_ROOT", str(tmp_path / "env-decks"))
    monkeypatch.setenv("FLASHDECK_STRICT_REVIEWS", "true")
    config = resolve_config()
    assert config.decks_root == (tmp_path / "env-decks").resolve()
    assert config.strict_reviews is True


def test_toml_file_is_read(mock_home, tmp_path):
    cfg_dir = mock_home / ".config" / "flashdeck"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "config.toml").write_text(f'decks_root = "{tmp_path / "toml-decks"}"\nverbose = 2\n')

    config = resolve_config()

    assert config.decks_root == (tmp_path / "toml-decks").resolve()
    assert config.verbose == 2


def test_cli_overrides_win(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("FLASHDECK_DECKS_ROOT", str(tmp_path / "env-decks"))
    config = resolve_config({"decks_root": tmp_path / "cli-decks", "verbose": None})
    assert config.decks_root == (tmp_path / "cli-decks").resolve()
    assert config.verbose == 1


def test_relative_paths_are_resolved(mock_home):
    config = AppConfig(decks_root="decks")
    assert config.decks_root.is_absolute()

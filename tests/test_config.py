import pytest

pytest.importorskip("pygame")

from tank_arena.pygame import config


@pytest.fixture
def settings_path(monkeypatch, tmp_path):
    path = tmp_path / "nested" / "user_settings.json"
    monkeypatch.setattr(config, "_SETTINGS_PATH", path)
    return path


def test_missing_file_gives_empty_settings(settings_path):
    assert config.load_user_settings() == {}


def test_saved_settings_are_loaded_back(settings_path):
    config.save_user_settings({"speed": 4.0, "time_limit": 12_000})

    assert settings_path.exists()
    assert config.load_user_settings() == {"speed": 4.0, "time_limit": 12_000}


def test_corrupt_file_is_ignored(settings_path, caplog):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("{not json", encoding="utf-8")

    assert config.load_user_settings() == {}
    assert "Ignoring unreadable settings file" in caplog.text


def test_non_mapping_file_is_ignored(settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("[1, 2, 3]", encoding="utf-8")

    assert config.load_user_settings() == {}

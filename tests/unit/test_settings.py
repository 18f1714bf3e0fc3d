import json
from pathlib import Path

from raygate.local.config import MergedSettings


def test_defaults_are_loaded(tmp_path: Path) -> None:
    settings = MergedSettings(overrides_path=tmp_path / "overrides.json")
    assert isinstance(settings.V2RAY_CONFIG_PATH, Path)
    assert "V2RAY_CONFIG_PATH" in settings.MODIFIABLE_SETTINGS
    assert settings.LOKI_ENABLED is False


def test_overrides_apply_only_to_modifiable_settings(tmp_path: Path) -> None:
    overrides = tmp_path / "overrides.json"
    overrides.write_text(json.dumps({
        "V2RAY_CONFIG_PATH": str(tmp_path / "config.json"),
        "LOKI_URL": "http://attacker:3100",
        "UNKNOWN_SETTING": 1,
    }))
    settings = MergedSettings(overrides_path=overrides)
    assert settings.V2RAY_CONFIG_PATH == tmp_path / "config.json"
    assert settings.LOKI_URL != "http://attacker:3100"
    assert not hasattr(settings, "UNKNOWN_SETTING")


def test_malformed_overrides_are_ignored(tmp_path: Path) -> None:
    overrides = tmp_path / "overrides.json"
    overrides.write_text("{not json")
    settings = MergedSettings(overrides_path=overrides)
    assert isinstance(settings.V2RAY_CONFIG_PATH, Path)


def test_update_setting_coerces_and_persists(tmp_path: Path) -> None:
    overrides = tmp_path / "conf" / "overrides.json"
    settings = MergedSettings(overrides_path=overrides)

    success, _ = settings.update_setting("LOG_BUFFER_BATCH_SIZE", "50")
    assert success
    assert settings.LOG_BUFFER_BATCH_SIZE == 50

    success, _ = settings.update_setting("V2RAY_CONFIG_PATH", str(tmp_path / "out.json"))
    assert success
    assert settings.V2RAY_CONFIG_PATH == tmp_path / "out.json"

    saved = json.loads(overrides.read_text())
    assert saved["LOG_BUFFER_BATCH_SIZE"] == 50
    assert saved["V2RAY_CONFIG_PATH"] == str(tmp_path / "out.json")

    reloaded = MergedSettings(overrides_path=overrides)
    assert reloaded.V2RAY_CONFIG_PATH == tmp_path / "out.json"


def test_update_setting_rejects_bad_values(tmp_path: Path) -> None:
    settings = MergedSettings(overrides_path=tmp_path / "overrides.json")
    success, message = settings.update_setting("LOG_BUFFER_BATCH_SIZE", "many")
    assert not success
    assert "Could not convert" in message

    success, message = settings.update_setting("LOKI_URL", "http://other")
    assert not success
    assert "not modifiable" in message
    assert not (tmp_path / "overrides.json").exists()
